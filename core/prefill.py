# core/prefill.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from memory.models import CareerRecord, EducationRecord

_SECTIONS = ("basic_info", "physical_info", "family_info", "residence_info")
_PARTNER_SECTIONS = ("partner_preference", "partner_expectation")


def _first(*values: Any) -> str:
    """First value that is not None/empty, as a stripped string."""
    for v in values:
        if v is None:
            continue
        if isinstance(v, (list, tuple)):
            joined = ",".join(str(x).strip() for x in v if str(x).strip())
            if joined:
                return joined
            continue
        s = str(v).strip()
        if s:
            return s
    return ""


def _as_dict(x: Any) -> Dict[str, Any]:
    return x if isinstance(x, dict) else {}


def profile_root(data: Any) -> Dict[str, Any]:
    data = _as_dict(data)
    return _as_dict(data.get("profile") or data.get("user") or data)


def flatten_profile(data: Any) -> Dict[str, Any]:
    """
    The profile endpoint nests sections (basic_info, family_info, ...).
    Merge them onto one flat dict; later sections win on key clashes.
    """
    root = profile_root(data)
    flat: Dict[str, Any] = dict(root)
    for section in _SECTIONS:
        flat.update(_as_dict(root.get(section)))
    residence = _as_dict(root.get("residence_info"))
    flat.update(_as_dict(residence.get("present_address")))
    for section in ("education_info", "career_info"):
        val = root.get(section)
        if isinstance(val, list):
            flat.update(_as_dict(val[0]) if val else {})
        else:
            flat.update(_as_dict(val))
    return flat


def _looking_for(value: Any, current: str) -> str:
    v = _first(value)
    if v in ("1", "2"):
        return v
    if v.lower() == "bridegroom":
        return "1"
    if v.lower() == "bride":
        return "2"
    return current


def form_from_profile(form: Mapping[str, Any], data: Any) -> Dict[str, Any]:
    """Return a new form with the fields the profile already has."""
    root = profile_root(data)
    p = flatten_profile(data)
    partner: Dict[str, Any] = {}
    for section in _PARTNER_SECTIONS:
        partner.update(_as_dict(root.get(section)))

    out = dict(form)
    updates = {
        # basic
        "firstname": _first(p.get("firstname")),
        "lastname": _first(p.get("lastname")),
        "birth_date": _first(p.get("birth_date"), p.get("date_of_birth")),
        "religion_id": _first(p.get("religion_id"), p.get("religion"), form.get("religion_id")),
        "gender": _first(p.get("gender")),
        "looking_for": _looking_for(p.get("looking_for"), str(form.get("looking_for") or "")),
        "marital_status": _first(p.get("marital_status")).lower(),
        "caste": _first(p.get("caste"), form.get("caste")),
        "mother_tongue": _first(p.get("mother_tongue")),
        "languages": _first(p.get("language"), p.get("languages")),
        "profession": _first(p.get("profession")),
        "financial_condition": _first(p.get("financial_condition")),
        "smoking_status": _first(p.get("smoking_status"), p.get("smokingHabits")),
        "drinking_status": _first(p.get("drinking_status"), p.get("drinkingHabits")),
        "country": _first(p.get("country")),
        "state": _first(p.get("state")),
        "city": _first(p.get("city")),
        "zip": _first(p.get("zip")),
        # family
        "father_name": _first(p.get("father_name"), p.get("fatherName")),
        "father_profession": _first(p.get("father_profession"), p.get("fatherProfession")),
        "father_contact": _first(p.get("father_contact"), p.get("fatherContact")),
        "mother_name": _first(p.get("mother_name"), p.get("motherName")),
        "mother_profession": _first(p.get("mother_profession"), p.get("motherProfession")),
        "mother_contact": _first(p.get("mother_contact"), p.get("motherContact")),
        "total_brother": _first(p.get("total_brother"), p.get("numberOfBrothers")),
        "total_sister": _first(p.get("total_sister"), p.get("numberOfSisters")),
        # physical
        "height": _first(p.get("height")),
        "weight": _first(p.get("weight")),
        "blood_group": _first(p.get("blood_group"), p.get("bloodGroup")),
        "eye_color": _first(p.get("eye_color"), p.get("eyeColor")),
        "hair_color": _first(p.get("hair_color"), p.get("hairColor")),
        "complexion": _first(p.get("complexion")),
        "disability": _first(p.get("disability")),
        # partner expectation
        "partner_general_requirement": _first(partner.get("general_requirement"), partner.get("requirements")),
        "partner_country": _first(partner.get("country")),
        "partner_min_age": _first(partner.get("min_age")),
        "partner_max_age": _first(partner.get("max_age")),
        "partner_min_height": _first(partner.get("min_height")),
        "partner_max_height": _first(partner.get("max_height")),
        "partner_marital_status": _first(partner.get("marital_status")),
        "partner_religion": _first(partner.get("religion")),
        "partner_complexion": _first(partner.get("complexion")),
        "partner_smoking_status": _first(partner.get("smoking_status")),
        "partner_drinking_status": _first(partner.get("drinking_status")),
        "partner_language": _first(partner.get("language")),
        "partner_education": _first(partner.get("education"), partner.get("min_degree")),
        "partner_profession": _first(partner.get("profession")),
        "partner_financial_condition": _first(partner.get("financial_condition")),
        "partner_family_values": _first(partner.get("family_values"), partner.get("family_position")),
    }
    # Only overwrite with something; blanks keep whatever the form had.
    for key, value in updates.items():
        if value:
            out[key] = value
    return out


def education_from_profile(data: Any) -> Optional[List[EducationRecord]]:
    root = profile_root(data)
    items = root.get("education_info") or root.get("educations")
    if not isinstance(items, list) or not items:
        return None
    return [
        EducationRecord(
            institute=_first(e.get("institute")),
            degree=_first(e.get("degree")),
            field_of_study=_first(e.get("field_of_study"), e.get("fieldOfStudy")),
            start=_first(e.get("start")),
            end=_first(e.get("end")),
        )
        for e in items
        if isinstance(e, dict)
    ]


def career_from_profile(data: Any) -> Optional[List[CareerRecord]]:
    root = profile_root(data)
    items = root.get("career_info") or root.get("careers")
    if not isinstance(items, list) or not items:
        return None
    return [
        CareerRecord(
            company=_first(c.get("company")),
            designation=_first(c.get("designation")),
            start=_first(c.get("start")),
            end=_first(c.get("end")),
        )
        for c in items
        if isinstance(c, dict)
    ]


def form_from_registration(form: Mapping[str, Any], registration: Mapping[str, Any]) -> Dict[str, Any]:
    """Seed the form from the payload the registration screen hands over."""
    reg = _as_dict(registration)
    out = dict(form)

    gender = _first(reg.get("gender"))
    if not gender:
        looking_for = _first(reg.get("looking_for"))
        gender = {"1": "male", "2": "female"}.get(looking_for, "")

    updates = {
        "firstname": _first(reg.get("firstname")),
        "lastname": _first(reg.get("lastname")),
        "birth_date": _first(reg.get("birth_date")),
        "religion_id": _first(reg.get("religion_id"), reg.get("religion")),
        "caste": _first(reg.get("caste_id"), reg.get("caste")),
        "looking_for": _first(reg.get("looking_for")),
        "country": _first(reg.get("country")),
        "state": _first(reg.get("state"), reg.get("present_state")),
        "gender": gender,
    }
    for key, value in updates.items():
        if value:
            out[key] = value
    return out
