from __future__ import annotations

import os
from enum import Enum

_LOG_FULL_OBJECT_INFO = os.environ.get("LOG_FULL_OBJECT_INFO", "NO").upper() in ("YES", "ON", "TRUE", "1")


def _fmt_value(value) -> str | None:
    """Short text form of the value, None means the value is skipped."""
    if value is None:
        return "None" if _LOG_FULL_OBJECT_INFO else None
    elif isinstance(value, bool):
        return str(value) if (value or _LOG_FULL_OBJECT_INFO) else None
    elif isinstance(value, Enum):
        return value.name
    elif isinstance(value, (bytes, bytearray)):
        if not value:
            return None
        value = value.hex()
        if (not _LOG_FULL_OBJECT_INFO) and (len(value) > 20):
            value = value[:20] + "..."
        return "'" + value + "'"
    elif isinstance(value, (list, tuple, set)):
        if not value:
            return None
        if not _LOG_FULL_OBJECT_INFO:
            return type(value).__name__ + "(len=" + str(len(value)) + ")"
        item_list = [_fmt_value(item) or "?" for item in value]
        return type(value).__name__ + "([" + ", ".join(item_list) + "])"
    elif isinstance(value, dict):
        return "dict(" + _fmt_dict(value) + ")"

    value = str(value)
    return value if value else None


def _fmt_dict(src: dict) -> str:
    item_list: list[str] = list()
    for key, value in src.items():
        key = str(key)
        if key.startswith("_"):
            continue
        if (value := _fmt_value(value)) is not None:
            item_list.append(key + "=" + value)
    return ", ".join(item_list)


def str_fmt_object(obj, name: str = "") -> str:
    if obj is None:
        return "None"

    name = name or type(obj).__name__
    if isinstance(obj, dict):
        return name + "(" + _fmt_dict(obj) + ")"
    elif hasattr(obj, "__pydantic_fields__"):
        return name + "(" + _fmt_dict({key: getattr(obj, key) for key in obj.__pydantic_fields__}) + ")"
    elif hasattr(obj, "__dict__"):
        return name + "(" + _fmt_dict(obj.__dict__) + ")"
    return _fmt_value(obj) or "?"
