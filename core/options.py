# core/options.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"

# Lookup order for the display name of an option object.
_NAME_KEYS = ("name", "label", "title", "country", "state", "city", "nicename")
# Lookup order for the identifier of an option object inside a list.
_ID_KEYS = ("id", "value", "key", "code")


@dataclass(frozen=True)
class Option:
    id: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name}


class RawShape(str, Enum):
    LIST = "list"
    MAPPING = "mapping"
    EMPTY = "empty"
    SCALAR = "scalar"


def detect_shape(raw: Any) -> RawShape:
    if raw is None or raw == "" or raw == [] or raw == {}:
        return RawShape.EMPTY
    if isinstance(raw, (list, tuple)):
        return RawShape.LIST
    if isinstance(raw, dict):
        return RawShape.MAPPING
    return RawShape.SCALAR


def _safe_str(x: Any) -> str:
    return str(x).strip() if x is not None else ""


def _first_string(obj: Dict[str, Any]) -> str:
    for v in obj.values():
        if isinstance(v, str) and v.strip():
            return v.strip()
    return ""


def extract_name(value: Any) -> str:
    """
    Display name of a raw option value.
    Handles plain strings, numbers, {"name": ...}, {"label": ...},
    {"name": {"en": ...}} and falls back to the first string property.
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, dict):
        for key in _NAME_KEYS:
            cand = value.get(key)
            if isinstance(cand, dict):
                nested = cand.get("en")
                cand = nested if isinstance(nested, str) and nested.strip() else _first_string(cand)
            if isinstance(cand, (int, float)) and not isinstance(cand, bool):
                return str(cand)
            if isinstance(cand, str) and cand.strip():
                return cand.strip()
        return _first_string(value)
    return ""


def _extract_id(item: Any, name: str) -> str:
    if isinstance(item, dict):
        for key in _ID_KEYS:
            v = item.get(key)
            if v is not None and _safe_str(v):
                return _safe_str(v)
        return name
    return _safe_str(item)


def _entries(raw: Any, shape: RawShape) -> Iterable[Option]:
    if shape is RawShape.LIST:
        for item in raw:
            name = extract_name(item)
            yield Option(id=_extract_id(item, name), name=name)
    elif shape is RawShape.MAPPING:
        for key, value in raw.items():
            yield Option(id=_safe_str(key), name=extract_name(value))
    elif shape is RawShape.SCALAR:
        # a bare string or number is an error body, not a list of choices
        logger.warning("ignoring scalar option payload: %r", raw)


def dedupe_options(options: Iterable[Option]) -> List[Option]:
    seen: set[str] = set()
    out: List[Option] = []
    for opt in options:
        if not opt.name or opt.name == UNKNOWN_NAME:
            continue
        key = opt.name.casefold()
        if key in seen:
            continue
        seen.add(key)
        out.append(opt)
    return out


def resolve_options(raw: Any, fallback: Optional[Sequence[Option]] = None) -> List[Option]:
    """
    Normalize a server option payload of unknown shape into [Option].

    Never raises: malformed input degrades to the fallback (or []).
    """
    try:
        shape = detect_shape(raw)
        options = dedupe_options(_entries(raw, shape))
    except Exception as e:
        logger.warning("option payload could not be resolved (%s): %r", type(raw).__name__, e)
        options = []

    if not options and fallback:
        return list(fallback)
    return options


def unwrap_payload(body: Any, *keys: str) -> Any:
    """`body.data ?? body`, then optionally descend into the first present key."""
    data = body
    if isinstance(body, dict):
        if body.get("data") is not None:
            data = body["data"]
        elif "status" in body:
            # envelope without a data section
            return []
    if isinstance(data, dict):
        for key in keys:
            if data.get(key) is not None:
                return data[key]
    return data


def find_option(options: Sequence[Option], value: Any) -> Optional[Option]:
    """Match by id first, then by case-insensitive name."""
    v = _safe_str(value)
    if not v:
        return None
    for opt in options:
        if opt.id == v:
            return opt
    low = v.casefold()
    for opt in options:
        if opt.name.casefold() == low:
            return opt
    return None


def option_label(options: Sequence[Option], value: Any) -> str:
    opt = find_option(options, value)
    return opt.name if opt else _safe_str(value)


def is_known_id(options: Sequence[Option], value: Any) -> bool:
    v = _safe_str(value)
    return any(opt.id == v for opt in options)
