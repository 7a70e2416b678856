"""
Shared schema helpers - validation of untyped request payloads.
"""
from pydantic import BaseModel, ValidationError
from typing import Any, Dict, List, Mapping, Type, TypeVar

from app.core.exceptions import FieldValidationError

M = TypeVar("M", bound=BaseModel)


def _label(field: str) -> str:
    return field.replace("_", " ")


def describe_error(field: str, error: Dict[str, Any]) -> str:
    """Turn one pydantic error into a sentence the form can show under the field"""
    label = _label(field)
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}

    if error_type == "missing" or (error_type == "string_too_short" and ctx.get("min_length") == 1):
        return f"The {label} field is required."
    if error_type == "string_type":
        return f"The {label} field must be a string."
    if error_type == "string_too_long":
        return f"The {label} field must not be greater than {ctx.get('max_length')} characters."
    if error_type in ("int_parsing", "int_type", "int_from_float"):
        return f"The {label} field must be an integer."
    if error_type == "greater_than_equal":
        return f"The {label} field must be at least {ctx.get('ge')}."
    if error_type == "less_than_equal":
        return f"The {label} field must not be greater than {ctx.get('le')}."
    if error_type == "list_type":
        return f"The {label} field must be a list."
    return f"The {label} field is invalid."


def field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Group every pydantic error by top-level field"""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__root__",)
        field = str(loc[0])
        errors.setdefault(field, []).append(describe_error(field, error))
    return errors


def validate_payload(schema: Type[M], payload: Mapping[str, Any]) -> M:
    """
    Validate a raw payload against `schema`, reporting all failing fields.

    Raises:
        FieldValidationError: with every failing field, not just the first
    """
    if not isinstance(payload, Mapping):
        raise FieldValidationError({"__root__": ["The request body must be an object."]})
    try:
        return schema.model_validate(dict(payload))
    except ValidationError as exc:
        raise FieldValidationError(field_errors(exc))


def merge_errors(*groups: Mapping[str, List[str]]) -> Dict[str, List[str]]:
    merged: Dict[str, List[str]] = {}
    for group in groups:
        for field, messages in group.items():
            merged.setdefault(field, []).extend(messages)
    return merged


class MessageResponse(BaseModel):
    message: str
