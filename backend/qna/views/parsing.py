"""Request parsing stages: each returns a validated model or raises RequestValidationError."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError

if TYPE_CHECKING:
    from starlette.requests import Request

ModelT = TypeVar("ModelT", bound=BaseModel)


class RequestValidationError(Exception):
    """Request body or query string could not be parsed into the expected model."""

    def __init__(self, message: str, status_code: int = 422) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


async def parse_json_body(request: Request, model: type[ModelT]) -> ModelT:
    raw_body = await request.body()
    try:
        body = json.loads(raw_body)
    except ValueError as e:
        raise RequestValidationError("Invalid JSON body") from e
    if not isinstance(body, dict):
        raise RequestValidationError("JSON body must be an object")
    return _validate(model, body)


async def parse_form_body(request: Request, model: type[ModelT]) -> ModelT:
    form = await request.form()
    return _validate(model, {key: value for key, value in form.items() if isinstance(value, str)})


def parse_query(request: Request, model: type[ModelT]) -> ModelT:
    """Validate query parameters. Malformed values are a 400, not a 422."""
    try:
        return model.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise RequestValidationError(_summarize(e), status_code=400) from e


def _validate(model: type[ModelT], data: dict) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(_summarize(e)) from e


def _summarize(error: ValidationError) -> str:
    """Render field errors without echoing submitted values (they may be passwords)."""
    parts = []
    for item in error.errors(include_input=False, include_url=False):
        location = ".".join(str(p) for p in item["loc"]) or "body"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)
