# core/catalogs.py
# Static option lists the app ships with (no endpoint behind them).
from __future__ import annotations

from typing import Dict, List

from core.options import Option


def _opts(pairs) -> List[Option]:
    return [Option(id=str(i), name=n) for i, n in pairs]


SMOKING_STATUS = _opts([(0, "No"), (1, "Yes"), (2, "Occasionally")])
DRINKING_STATUS = _opts([(0, "No"), (1, "Yes"), (2, "Occasionally")])

LOOKING_FOR = _opts([(1, "Groom"), (2, "Bride")])

FINANCIAL_CONDITIONS = _opts([(n, n) for n in ("Struggling", "Average", "Stable", "Wealthy")])

DEFAULT_MARITAL_STATUSES = _opts([(1, "Single"), (2, "Married"), (3, "Divorced"), (4, "Widowed")])

DEFAULT_COUNTRY = Option(id="IN", name="India")

# The server stores blood group as its label.
DEFAULT_BLOOD_GROUPS = _opts([(g, g) for g in ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")])

HEIGHTS = [
    Option(id=f"{feet}.{inches:02d}", name=f"{feet}'{inches}\"")
    for feet in (4, 5, 6)
    for inches in range(12)
    if (feet, inches) >= (4, 6) and (feet, inches) <= (6, 6)
]

WEIGHTS = [Option(id=str(kg), name=f"{kg} kg") for kg in range(40, 121)]

COMPLEXIONS = _opts([("fair", "Fair"), ("wheatish", "Wheatish"), ("brown", "Brown"), ("dark", "Dark")])

EYE_COLORS = _opts([(c.lower(), c) for c in ("Black", "Brown", "Hazel", "Green", "Blue", "Gray")])

HAIR_COLORS = _opts([(c.lower(), c) for c in ("Black", "Brown", "Blonde", "Red", "Gray", "White")])

STATIC_OPTIONS: Dict[str, List[Option]] = {
    "smoking_status": SMOKING_STATUS,
    "drinking_status": DRINKING_STATUS,
    "looking_for": LOOKING_FOR,
    "financial_condition": FINANCIAL_CONDITIONS,
    "height": HEIGHTS,
    "weight": WEIGHTS,
    "complexion": COMPLEXIONS,
    "eye_color": EYE_COLORS,
    "hair_color": HAIR_COLORS,
    "partner_smoking_status": SMOKING_STATUS,
    "partner_drinking_status": DRINKING_STATUS,
    "partner_min_height": HEIGHTS,
    "partner_max_height": HEIGHTS,
    "partner_complexion": COMPLEXIONS,
    "partner_financial_condition": FINANCIAL_CONDITIONS,
}
