from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class Suggestion(BaseModel):
    """A suggestion applying to a specific line in a file."""

    path: str = Field(..., description="The file path where the suggestion applies")
    line: int = Field(
        ..., description="The line number in the file where the suggestion applies"
    )
    suggestion: str = Field(
        ...,
        description=(
            "A concise suggestion for improvement, including code suggestions "
            "using ```suggestion syntax if applicable"
        ),
    )
    explanation: str = Field(
        ..., description="A brief explanation of why this change is recommended"
    )


class Review(BaseModel):
    overview: str = Field(
        ..., description="A concise, descriptive overview of your review in markdown format"
    )
    suggestions: list[Suggestion] = Field(
        ..., description="An array of line-by-line suggestion objects"
    )


class ChangedFile(BaseModel):
    filename: str
    patch: Optional[str] = None
    changes: int = 0
    status: Optional[str] = None

    model_config = {"extra": "ignore"}


class PullRequest(BaseModel):
    number: int
    body: Optional[str] = None


class Commit(BaseModel):
    sha: str

    model_config = {"extra": "ignore"}


class RunSuccess(BaseModel):
    status: Literal["success"] = "success"
    posted_comments: int = 0


class RunFailure(BaseModel):
    status: Literal["failure"] = "failure"
    message: str


RunOutcome = Annotated[Union[RunSuccess, RunFailure], Field(discriminator="status")]
