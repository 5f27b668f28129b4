"""Sanitize — strips executable and markup content from record text.

Invariants:
    - PURE: returns a new record, input untouched
    - Every str field and every list[str] entry is cleaned, at any nesting depth
    - `id` fields and Enum values are never rewritten
    - List entries that are empty after cleaning are dropped
"""

import re
from enum import Enum
from typing import TypeVar

from pydantic import BaseModel

M = TypeVar("M", bound=BaseModel)

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_JS_SCHEME = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)
_MARKUP_TAG = re.compile(r"</?[a-zA-Z][^>]*>")

_PROTECTED_FIELDS = frozenset({"id"})


def sanitize_text(text: str) -> str:
    text = _SCRIPT_BLOCK.sub("", text)
    text = _MARKUP_TAG.sub("", text)
    text = _JS_SCHEME.sub("", text)
    text = _EVENT_HANDLER.sub("", text)
    return text.strip()


def _sanitize_value(value: object) -> object:
    if isinstance(value, Enum) or value is None:
        return value
    if isinstance(value, str):
        return sanitize_text(value)
    if isinstance(value, list):
        cleaned = [_sanitize_value(v) for v in value]
        return [v for v in cleaned if not (isinstance(v, str) and v == "")]
    if isinstance(value, BaseModel):
        return sanitize_record(value)
    return value


def sanitize_record(record: M) -> M:
    """Return a copy of a record model with all text cleaned."""
    changes = {
        name: _sanitize_value(getattr(record, name))
        for name in type(record).model_fields
        if name not in _PROTECTED_FIELDS
    }
    return record.model_copy(update=changes)
