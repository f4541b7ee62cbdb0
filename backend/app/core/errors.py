from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


AUTHENTICATION = "authentication"
CONNECTION = "connection"
GENERIC = "generic"

_CATEGORY_BY_CODE = {
    "EAUTH": AUTHENTICATION,
    "ETIMEDOUT": CONNECTION,
    "ECONNECTION": CONNECTION,
}


@dataclass(frozen=True)
class ValidationFailure:
    """First constraint a submission violated, with its dotted field path."""

    message: str
    field: str


@dataclass(frozen=True)
class ConfigurationError:
    message: str
    setting: str


@dataclass(frozen=True)
class DispatchError:
    """A failed delivery attempt, shaped after the SMTP client error it came from."""

    code: str
    detail: str = ""
    response_code: Optional[int] = None
    command: Optional[str] = None

    @property
    def category(self) -> str:
        return _CATEGORY_BY_CODE.get(self.code, GENERIC)

    def as_log_fields(self) -> dict:
        return {
            "code": self.code,
            "error": self.detail,
            "response_code": self.response_code,
            "command": self.command,
            "category": self.category,
        }


class PersistenceError(RuntimeError):
    pass
