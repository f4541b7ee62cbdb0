from __future__ import annotations

import json
from typing import Any, Optional

from fastapi import Request

from app.core.config import Settings
from app.services.mailer import Mailer


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


async def get_json_body(request: Request) -> Optional[Any]:
    """Raw decoded JSON body, or ``None`` when it is missing or malformed."""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
