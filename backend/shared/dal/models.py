"""Persistence models for the data access layer."""

from pydantic import BaseModel, ConfigDict, Field

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 10_000


class NewQuestion(BaseModel, frozen=True):
    """Question payload submitted by a client, before moderation and persistence."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)
    tags: list[str] | None = None


class Question(BaseModel, frozen=True):
    """Question as stored, with its store-assigned id."""

    id: int
    title: str
    content: str
    tags: list[str] | None = None


class NewAnswer(BaseModel, frozen=True):
    """Answer payload submitted by a client, before moderation and persistence."""

    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)
    question_id: int


class AnswerUpdate(BaseModel, frozen=True):
    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)


class Answer(BaseModel, frozen=True):
    """Answer as stored, with its store-assigned id."""

    id: int
    content: str
    question_id: int
