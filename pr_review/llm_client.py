# pr_review/llm_client.py
import logging

from openai import AsyncOpenAI

from .errors import ReviewError
from .models import Review

logger = logging.getLogger("pr-review.llm")


class ReviewClient:
    def __init__(self, client: AsyncOpenAI):
        self.client = client

    async def generate_review(self, prompt: str, model: str) -> Review:
        logger.info("Requesting review from %s (prompt length %d)", model, len(prompt))
        completion = await self.client.chat.completions.parse(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            response_format=Review,
        )
        message = completion.choices[0].message
        if getattr(message, "refusal", None):
            raise ReviewError(f"{model} refused to review: {message.refusal}")
        if message.parsed is None:
            raise ReviewError(f"{model} returned no structured review")
        logger.info("%s returned %d suggestions", model, len(message.parsed.suggestions))
        return message.parsed
