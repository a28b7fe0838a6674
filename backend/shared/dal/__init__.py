"""Data access layer: repository interfaces, store errors, and content models."""

from shared.dal.account_repository import AccountRepository
from shared.dal.content_repository import ContentRepository
from shared.dal.errors import DuplicateKeyError, PersistenceError
from shared.dal.models import Answer, AnswerUpdate, NewAnswer, NewQuestion, Question

__all__ = [
    "AccountRepository",
    "Answer",
    "AnswerUpdate",
    "ContentRepository",
    "DuplicateKeyError",
    "NewAnswer",
    "NewQuestion",
    "PersistenceError",
    "Question",
]
