from core.prefill import (
    career_from_profile,
    education_from_profile,
    flatten_profile,
    form_from_profile,
    form_from_registration,
)
from memory.models import CareerRecord, EducationRecord, default_form_state

PROFILE = {
    "profile": {
        "firstname": "Karthik",
        "lastname": "S",
        "basic_info": {"birth_date": "1993-01-01", "looking_for": "Bride", "marital_status": "Never Married"},
        "physical_info": {"height": 5.8, "blood_group": "B+"},
        "family_info": {"father_name": "Sundar", "total_brother": 1, "total_sister": 0},
        "education_info": [
            {"institute": "PSG", "degree": "BE", "field_of_study": "ECE", "start": "2010", "end": "2014"},
            {"institute": "IIM", "degree": "MBA"},
        ],
        "career_info": [{"company": "TCS", "designation": "Analyst", "start": "2014"}],
        "partner_preference": {"min_age": 22, "max_age": 28, "language": ["Tamil"], "family_position": "Traditional"},
    }
}


def test_flatten_merges_sections() -> None:
    flat = flatten_profile(PROFILE)
    assert flat["birth_date"] == "1993-01-01"
    assert flat["father_name"] == "Sundar"
    assert flat["institute"] == "PSG"
    assert flat["company"] == "TCS"


def test_form_from_profile_maps_fields() -> None:
    form = form_from_profile(default_form_state(), PROFILE)
    assert form["firstname"] == "Karthik"
    assert form["looking_for"] == "2"
    assert form["marital_status"] == "never married"
    assert form["height"] == "5.8"
    assert form["total_brother"] == "1"
    assert form["total_sister"] == "0"
    assert form["partner_min_age"] == "22"
    assert form["partner_language"] == "Tamil"
    assert form["partner_family_values"] == "Traditional"


def test_form_from_profile_keeps_existing_values_for_missing_keys() -> None:
    base = default_form_state()
    base["caste"] = "Brahmin"
    form = form_from_profile(base, {"user": {"firstname": "Meena"}})
    assert form["caste"] == "Brahmin"
    assert form["firstname"] == "Meena"
    assert base["firstname"] == ""


def test_record_lists_from_profile() -> None:
    assert education_from_profile(PROFILE) == [
        EducationRecord(institute="PSG", degree="BE", field_of_study="ECE", start="2010", end="2014"),
        EducationRecord(institute="IIM", degree="MBA"),
    ]
    assert career_from_profile(PROFILE) == [CareerRecord(company="TCS", designation="Analyst", start="2014")]
    assert education_from_profile({"profile": {}}) is None


def test_registration_seed_derives_gender() -> None:
    form = form_from_registration(
        default_form_state(), {"birth_date": "1996-02-02", "religion": 3, "caste_id": 9, "looking_for": "1"}
    )
    assert form["birth_date"] == "1996-02-02"
    assert form["religion_id"] == "3"
    assert form["caste"] == "9"
    assert form["gender"] == "male"


def test_registration_gender_wins_over_looking_for() -> None:
    form = form_from_registration(default_form_state(), {"gender": "f", "looking_for": "1"})
    assert form["gender"] == "f"
