"""
Column name normalization.

    >>> camel_case_to_snake_case("personId")
    'person_id'
    >>> camel_case_to_snake_case("yearOfBirth2")
    'year_of_birth_2'
"""

import re
from typing import Iterable, List

_UPPER_AFTER_LOWER = re.compile(r"([a-z0-9])([A-Z])")
_UPPER_RUN = re.compile(r"([A-Z]+)([A-Z][a-z])")
_DIGIT_AFTER_LETTER = re.compile(r"([A-Za-z])([0-9])")


def camel_case_to_snake_case(name: str) -> str:
    """Convert a camelCase name to snake_case; snake_case input is unchanged."""
    result = _UPPER_RUN.sub(r"\1_\2", name)
    result = _UPPER_AFTER_LOWER.sub(r"\1_\2", result)
    result = _DIGIT_AFTER_LETTER.sub(r"\1_\2", result)
    return result.lower()


def normalize_column_names(names: Iterable[str]) -> List[str]:
    return [camel_case_to_snake_case(name) for name in names]
