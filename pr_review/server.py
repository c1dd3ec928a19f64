import hashlib
import hmac
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from .action import run_action
from .config import Settings, configure_logging, get_settings
from .errors import ConfigurationError
from .models import RunFailure

logger = logging.getLogger("pr-review.server")

REVIEW_ACTIONS = {"opened", "synchronize", "reopened"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        configure_logging(get_settings().log_level)
    except ConfigurationError:
        configure_logging("info")
    yield


app = FastAPI(title="PR Review Webhook", lifespan=lifespan)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("%s", exc)
    return JSONResponse(RunFailure(message=str(exc)).model_dump())


def verify_github_signature(
    body: bytes,
    signature_header: str | None,
    secret: str | None,
) -> None:
    """
    Verify X-Hub-Signature-256 from GitHub webhook.

    Verification is skipped when no webhook secret is configured.
    """
    if not secret:
        return
    if not signature_header:
        logger.warning("Missing X-Hub-Signature-256 header")
        raise HTTPException(status_code=401, detail="Missing signature")

    try:
        sha_name, signature = signature_header.split("=", 1)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid signature format")

    if sha_name != "sha256":
        raise HTTPException(status_code=400, detail="Unsupported hash algorithm")

    mac = hmac.new(secret.encode("utf-8"), msg=body, digestmod=hashlib.sha256)
    if not hmac.compare_digest(mac.hexdigest(), signature):
        logger.warning("Invalid webhook signature")
        raise HTTPException(status_code=401, detail="Invalid signature")


@app.get("/")
async def root():
    return {"status": "ok", "app": "PR Review"}


@app.post("/webhook")
async def webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    x_github_event: str = Header(None, alias="X-GitHub-Event"),
    x_hub_signature_256: str = Header(None, alias="X-Hub-Signature-256"),
):
    raw_body = await request.body()
    verify_github_signature(raw_body, x_hub_signature_256, settings.webhook_secret)

    try:
        payload: Dict[str, Any] = json.loads(raw_body.decode("utf-8"))
    except json.JSONDecodeError:
        logger.exception("Invalid JSON payload")
        raise HTTPException(status_code=400, detail="Invalid JSON")

    logger.info(">>> Event: %s", x_github_event)

    if x_github_event == "ping":
        return JSONResponse({"msg": "pong"})

    if x_github_event != "pull_request":
        return JSONResponse({"msg": f"unhandled event {x_github_event}"})

    action = payload.get("action")
    if action not in REVIEW_ACTIONS:
        logger.info("Ignoring PR action: %s", action)
        return JSONResponse({"msg": f"ignored action {action}"})

    pr = payload.get("pull_request") or {}
    number = pr.get("number")
    if number is None:
        raise HTTPException(status_code=400, detail="Missing pull request number")

    repository = (payload.get("repository") or {}).get("full_name")
    outcome = await run_action(settings, int(number), repository)
    return JSONResponse(outcome.model_dump())
