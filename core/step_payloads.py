# core/step_payloads.py
"""
Step payload assembly.

Every function here is pure: it reads the flat form, the record lists and the
option lists, and returns a fresh dict in the shape the step's endpoint takes.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from core.options import Option, option_label
from core.state_machine import check_step
from memory.models import CareerRecord, EducationRecord

OptionLists = Mapping[str, Sequence[Option]]


def _s(form: Mapping[str, Any], key: str) -> str:
    v = form.get(key)
    return str(v).strip() if v is not None else ""


def split_list(value: Any) -> List[str]:
    """'English, Tamil,' -> ['English', 'Tamil']"""
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in str(value or "").split(",") if part.strip()]


def to_number(value: Any) -> int | float | str:
    """int when integral, float when decimal, '' when unparsable."""
    s = str(value if value is not None else "").strip()
    if not s:
        return ""
    try:
        return int(s)
    except ValueError:
        pass
    try:
        return float(s)
    except ValueError:
        return ""


def drinking_status_for_server(value: Any) -> Any:
    # The server's enumeration has no separate "occasionally"; the app sends
    # its '2' as 1. Kept as-is until the backend enum is confirmed.
    s = str(value if value is not None else "").strip()
    if s == "2":
        return 1
    return s


def _basic_info(form: Mapping[str, Any], options: OptionLists) -> Dict[str, Any]:
    return {
        "firstname": _s(form, "firstname"),
        "lastname": _s(form, "lastname"),
        "birth_date": _s(form, "birth_date"),
        "religion_id": _s(form, "religion_id"),
        "gender": _s(form, "gender"),
        "looking_for": _s(form, "looking_for"),
        "marital_status": option_label(options.get("marital_status", ()), _s(form, "marital_status")),
        "caste": option_label(options.get("caste", ()), _s(form, "caste")),
        "mother_tongue": _s(form, "mother_tongue"),
        "languages": split_list(form.get("languages")),
        "profession": _s(form, "profession"),
        "financial_condition": _s(form, "financial_condition"),
        "smoking_status": _s(form, "smoking_status"),
        "drinking_status": drinking_status_for_server(form.get("drinking_status")),
        "country": _s(form, "country"),
        "state": _s(form, "state"),
        "city": _s(form, "city"),
        "zip": _s(form, "zip"),
    }


def _family_info(form: Mapping[str, Any]) -> Dict[str, Any]:
    keys = (
        "father_name",
        "father_profession",
        "father_contact",
        "mother_name",
        "mother_profession",
        "mother_contact",
        "total_brother",
        "total_sister",
    )
    return {k: _s(form, k) for k in keys}


def education_columns(records: Sequence[EducationRecord]) -> Dict[str, List[str]]:
    # The endpoint takes parallel arrays, one per column, not a list of objects.
    return {
        "institute": [r.institute for r in records],
        "degree": [r.degree for r in records],
        "field_of_study": [r.field_of_study for r in records],
        "start": [r.start for r in records],
        "end": [r.end for r in records],
    }


def career_columns(records: Sequence[CareerRecord]) -> Dict[str, List[str]]:
    return {
        "company": [r.company for r in records],
        "designation": [r.designation for r in records],
        "start": [r.start for r in records],
        "end": [r.end for r in records],
    }


def _physical_attributes(form: Mapping[str, Any]) -> Dict[str, Any]:
    keys = ("height", "weight", "blood_group", "eye_color", "hair_color", "complexion", "disability")
    return {k: _s(form, k) for k in keys}


def _partner_expectation(form: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "general_requirement": _s(form, "partner_general_requirement"),
        "country": _s(form, "partner_country"),
        "min_age": to_number(form.get("partner_min_age")),
        "max_age": to_number(form.get("partner_max_age")),
        "min_height": to_number(form.get("partner_min_height")),
        "max_height": to_number(form.get("partner_max_height")),
        "marital_status": _s(form, "partner_marital_status"),
        "religion": _s(form, "partner_religion"),
        "complexion": _s(form, "partner_complexion"),
        "smoking_status": to_number(form.get("partner_smoking_status")),
        "drinking_status": to_number(form.get("partner_drinking_status")),
        "language": split_list(form.get("partner_language")),
        "education": _s(form, "partner_education"),
        "profession": _s(form, "partner_profession"),
        "financial_condition": _s(form, "partner_financial_condition"),
        "family_values": _s(form, "partner_family_values"),
    }


def assemble_step_payload(
    step: int,
    form: Mapping[str, Any],
    education: Sequence[EducationRecord] = (),
    career: Sequence[CareerRecord] = (),
    options: Optional[OptionLists] = None,
) -> Dict[str, Any]:
    options = options or {}
    check_step(step)
    if step == 1:
        return _basic_info(form, options)
    if step == 2:
        return _family_info(form)
    if step == 3:
        return education_columns(education)
    if step == 4:
        return career_columns(career)
    if step == 5:
        return _physical_attributes(form)
    return _partner_expectation(form)
