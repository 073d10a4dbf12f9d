import random
import string
from datetime import date, timedelta
from typing import Any, Dict, Optional

from faker import Faker

from services.common.codes import ENDORSEMENTS, EYE_COLORS, HAIR_COLORS, RESTRICTIONS
from services.document.compiler import add_years

from .config import GeneratorConfig

DOCUMENT_TYPES = ("DL", "ID", "CDL", "EDL")


def _fmt(d: date) -> str:
    return d.strftime("%m/%d/%Y")


def _clean(s: str) -> str:
    """Upper-case and keep to the printable AAMVA 'ANS' set."""
    allowed = set(string.ascii_uppercase + string.digits + " -'./,#&()+*")
    return "".join(ch for ch in s.upper() if ch in allowed).strip()


def generate_customer_identifier(rng: random.Random) -> str:
    """Jurisdiction-style DL number: one letter followed by 8-20 digits."""
    letter = rng.choice(string.ascii_uppercase)
    digits = "".join(str(rng.randint(0, 9)) for _ in range(rng.randint(8, 20)))
    return f"{letter}{digits}"


def generate_discriminator(rng: random.Random, issue: date) -> str:
    """Free-form discriminator: issue date + 5 random digits."""
    return issue.strftime("%Y%m%d") + "".join(str(rng.randint(0, 9)) for _ in range(5))


def generate_codes(rng: random.Random, table, max_len: int) -> str:
    if rng.random() < 0.6:
        return "NONE"
    k = rng.randint(1, max_len)
    return "".join(sorted(rng.sample(sorted(table), k)))


def generate_height(rng: random.Random, metric: bool) -> str:
    if metric:
        return f"{rng.randint(150, 200)} cm"
    return f"{rng.randint(4, 6)}'-{rng.randint(0, 11):02d}\""


def generate_weight(rng: random.Random, metric: bool) -> str:
    if metric:
        return f"{rng.randint(45, 130)} kg"
    return f"{rng.randint(95, 290)} lb"


def generate_address(fake: Faker) -> str:
    street = _clean(f"{fake.building_number()} {fake.street_name()}")
    city = _clean(fake.city())
    return f"{street}, {city}, {fake.state_abbr()} {fake.zipcode()}"


def generate_record(
    seed: Optional[int] = None,
    config: Optional[GeneratorConfig] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Generate one record mapping (camelCase keys) that passes validation.

    Card format follows the holder's age (vertical under 21) so no
    orientation warnings are produced.
    """
    config = config or GeneratorConfig()
    today = today or date.today()
    rng = random.Random(seed)
    fake = Faker(config.locale)
    fake.seed_instance(seed)

    sex = rng.choice(["M", "F", "X"])
    if sex == "F":
        first, middle = fake.first_name_female(), fake.first_name_female()
    else:
        first, middle = fake.first_name_male(), fake.first_name_male()

    age_days = rng.randint(config.min_age * 365, config.max_age * 365)
    dob = today - timedelta(days=age_days)
    issue = today - timedelta(days=rng.randint(0, config.max_issue_age_days))
    expiry = add_years(issue, config.validity_years)
    under_21 = add_years(dob, 21) > today

    metric = rng.random() < config.metric_ratio
    doc_type = rng.choices(DOCUMENT_TYPES, weights=config.document_type_weights, k=1)[0]

    record: Dict[str, Any] = {
        "familyName": _clean(fake.last_name()),
        "givenNames": f"{_clean(first)} {_clean(middle)}",
        "dateOfBirth": _fmt(dob),
        "dateOfIssue": _fmt(issue),
        "dateOfExpiry": _fmt(expiry),
        "customerIdentifier": generate_customer_identifier(rng),
        "documentDiscriminator": generate_discriminator(rng, issue),
        "address": generate_address(fake),
        "vehicleClassifications": rng.choice(config.vehicle_classes),
        "endorsements": generate_codes(rng, ENDORSEMENTS, 3),
        "restrictions": generate_codes(rng, RESTRICTIONS, 3),
        "sex": sex,
        "height": generate_height(rng, metric),
        "eyeColor": rng.choice(sorted(EYE_COLORS)),
        "hairColor": rng.choice(sorted(HAIR_COLORS)),
        "weight": generate_weight(rng, metric),
        "documentType": doc_type,
        "cardFormat": "vertical" if under_21 else "horizontal",
        "organDonor": rng.random() < 0.4,
        "veteran": rng.random() < 0.08,
        "compliance": {"realId": rng.random() < config.real_id_ratio},
    }
    return record
