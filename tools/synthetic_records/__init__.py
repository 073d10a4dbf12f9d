"""
Synthetic DL/ID Record Generator
================================

Generates realistic (fake) AAMVA DL/ID holder records with Faker and
compiles them into documents for demos, fixtures and load tests.

Features:
- US names and addresses (Faker en_US)
- Dates consistent with holder age and document validity
- Card format chosen from holder age (vertical under 21)
- Seedable for reproducible datasets

Usage:
    from tools.synthetic_records import GeneratorConfig, generate_record

    record = generate_record(seed=42)  # camelCase mapping, passes validation
"""

from .config import GeneratorConfig
from .utils import (
    generate_address,
    generate_customer_identifier,
    generate_height,
    generate_record,
    generate_weight,
)

__version__ = "1.0.0"

__all__ = [
    "GeneratorConfig",
    "generate_record",
    "generate_address",
    "generate_customer_identifier",
    "generate_height",
    "generate_weight",
]
