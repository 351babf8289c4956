"""
Bulletin Board API — Request Body Validation
==============================================

What:  Turns a JSON body into a validated pydantic model or a ValidationError
       whose message names the offending fields.

    {"nickname": "sam"}  →  ValidationError("Missing required field(s): title, street_name")
"""

from typing import Type, TypeVar

import pydantic
from pydantic import BaseModel

from bulletin.exceptions import ValidationError
from bulletin.router import RouteRequest

ModelT = TypeVar("ModelT", bound=BaseModel)


def _field_name(loc) -> str:
    return ".".join(str(part) for part in loc) or "body"


def describe_errors(exc: pydantic.ValidationError) -> ValidationError:
    missing, invalid = [], []
    for error in exc.errors():
        name = _field_name(error.get("loc", ()))
        target = missing if error.get("type") == "missing" else invalid
        if name not in target:
            target.append(name)

    parts = []
    if missing:
        parts.append(f"Missing required field(s): {', '.join(missing)}")
    if invalid:
        parts.append(f"Invalid field(s): {', '.join(invalid)}")
    return ValidationError(message="; ".join(parts) or "Invalid request body", fields=missing + invalid)


def parse_body(model: Type[ModelT], request: RouteRequest) -> ModelT:
    """
    Parse and validate the request body against `model`.

    Raises:
        ValidationError: Body is not a JSON object, or fails the schema (→ 400).
        json.JSONDecodeError: Body is not JSON at all (→ 500 via the router).
    """
    payload = request.json()
    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object")
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        raise describe_errors(e) from None
