from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.core.errors import ValidationFailure

ModelT = TypeVar("ModelT", bound=BaseModel)

_REQUIRED_TYPES = {"missing", "string_too_short"}
_TYPE_ERRORS = {
    "string_type": "{label} must be a string",
    "bool_type": "{label} must be true or false",
    "bool_parsing": "{label} must be true or false",
}
_EMAIL_ERROR_PREFIX = "value is not a valid email address"


def _field_labels(schema: Type[BaseModel]) -> dict[str, str]:
    labels: dict[str, str] = {}
    for name, info in schema.model_fields.items():
        label = info.title or name.replace("_", " ").capitalize()
        labels[name] = label
        if info.alias:
            labels[info.alias] = label
    return labels


def _describe(error: dict, label: str) -> str:
    kind = error["type"]
    if kind in _REQUIRED_TYPES:
        return f"{label} is required"
    if kind in _TYPE_ERRORS:
        return _TYPE_ERRORS[kind].format(label=label)
    if kind == "value_error" and error["msg"].startswith(_EMAIL_ERROR_PREFIX):
        return "Invalid email address"
    return error["msg"]


def validate_submission(schema: Type[ModelT], raw_body: Any) -> ModelT | ValidationFailure:
    """Parse ``raw_body`` into ``schema``.

    Only the first violated constraint is reported. Fields are checked in
    declaration order, so the same bad payload always names the same field.
    """
    if not isinstance(raw_body, dict):
        return ValidationFailure(message="Request body must be a JSON object", field="")

    try:
        return schema.model_validate(raw_body)
    except ValidationError as exc:
        first = exc.errors()[0]
        path = ".".join(str(part) for part in first["loc"])
        head = str(first["loc"][0]) if first["loc"] else ""
        label = _field_labels(schema).get(head, head or "Value")
        return ValidationFailure(message=_describe(first, label), field=path)
