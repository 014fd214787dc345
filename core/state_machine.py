# core/state_machine.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

FIRST_STEP = 1
LAST_STEP = 6

STEP_SECTIONS: Dict[int, str] = {
    1: "basic-info",
    2: "family-info",
    3: "education-info",
    4: "career-info",
    5: "physical-attributes",
    6: "partner-expectation",
}

STEP_TITLES: Dict[int, str] = {
    1: "Basic Information",
    2: "Family Information",
    3: "Education Information",
    4: "Career Information",
    5: "Physical Attributes",
    6: "Partner Expectation",
}

# Flat form fields that must be filled before a step is sent.
REQUIRED_FIELDS: Dict[int, tuple[str, ...]] = {
    1: ("firstname", "lastname", "birth_date", "mother_tongue", "languages", "profession", "financial_condition"),
    2: ("father_name", "mother_name"),
    5: ("height", "weight", "blood_group"),
}

# Per-record fields for the list steps.
REQUIRED_RECORD_FIELDS: Dict[int, tuple[str, ...]] = {
    3: ("institute", "degree"),
    4: ("company", "designation"),
}


def check_step(step: int) -> int:
    if step not in STEP_SECTIONS:
        raise ValueError(f"step must be between {FIRST_STEP} and {LAST_STEP}, got {step!r}")
    return step


def step_endpoint(step: int) -> str:
    return f"/profile/{STEP_SECTIONS[check_step(step)]}"


def skip_endpoint(step: int) -> str:
    return f"{step_endpoint(step)}/skip"


def next_step(step: int) -> Optional[int]:
    """None means the wizard is finished."""
    check_step(step)
    return step + 1 if step < LAST_STEP else None


def previous_step(step: int) -> int:
    check_step(step)
    return max(FIRST_STEP, step - 1)


def missing_required(
    step: int,
    form: Mapping[str, Any],
    records: Sequence[Any] = (),
) -> List[str]:
    """
    Names of required fields still blank for this step.
    Record fields are reported as `<field>[<index>]`.
    """
    missing = [f for f in REQUIRED_FIELDS.get(step, ()) if not str(form.get(f) or "").strip()]

    record_fields = REQUIRED_RECORD_FIELDS.get(step)
    if record_fields:
        if not records:
            missing.extend(record_fields)
        for i, rec in enumerate(records):
            for f in record_fields:
                if not str(getattr(rec, f, "") or "").strip():
                    missing.append(f"{f}[{i}]")
    return missing
