from __future__ import annotations

from app.models.inquiry import Inquiry

__all__ = ["Inquiry"]
