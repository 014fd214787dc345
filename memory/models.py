from dataclasses import asdict, dataclass


@dataclass
class EducationRecord:
    institute: str = ""
    degree: str = ""
    field_of_study: str = ""
    start: str = ""
    end: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CareerRecord:
    company: str = ""
    designation: str = ""
    start: str = ""
    end: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


def default_form_state() -> dict:
    return {
        # Step 1: basic info
        "firstname": "",
        "lastname": "",
        "birth_date": "",        # YYYY-MM-DD
        "religion_id": "",
        "gender": "",            # m / f
        "looking_for": "",       # 1 = Groom, 2 = Bride
        "marital_status": "",
        "caste": "",
        "mother_tongue": "",
        "languages": "",         # comma separated
        "profession": "",
        "financial_condition": "",
        "smoking_status": "",    # 0/1/2
        "drinking_status": "",   # 0/1/2
        "country": "",
        "state": "",
        "city": "",
        "zip": "",
        # Step 2: family
        "father_name": "",
        "father_profession": "",
        "father_contact": "",
        "mother_name": "",
        "mother_profession": "",
        "mother_contact": "",
        "total_brother": "",
        "total_sister": "",
        # Step 5: physical attributes
        "height": "",
        "weight": "",
        "blood_group": "",
        "eye_color": "",
        "hair_color": "",
        "complexion": "",
        "disability": "",
        # Step 6: partner expectation
        "partner_general_requirement": "",
        "partner_country": "",
        "partner_min_age": "",
        "partner_max_age": "",
        "partner_min_height": "",
        "partner_max_height": "",
        "partner_marital_status": "",
        "partner_religion": "",
        "partner_complexion": "",
        "partner_smoking_status": "",
        "partner_drinking_status": "",
        "partner_language": "",  # comma separated
        "partner_education": "",
        "partner_profession": "",
        "partner_financial_condition": "",
        "partner_family_values": "",
    }
