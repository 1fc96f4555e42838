"""
Ecuadorian national ID (cédula de identidad) checksum validation.

A cédula has 10 digits:
- digits 1-2: province code, 01-24, or 30 for citizens registered abroad
- digit 3: less than 6 for natural persons
- digit 10: check digit

The check digit uses coefficients 2,1,2,1,2,1,2,1,2 over the first nine
digits. Products above 9 have 9 subtracted, and the check digit is
(10 - sum % 10) % 10.
"""

import re
from typing import Any, Callable

CiValidator = Callable[[str], bool]

CI_PATTERN = re.compile(r"\d{10}", re.ASCII)
COEFFICIENTS = (2, 1, 2, 1, 2, 1, 2, 1, 2)
MAX_PROVINCE = 24
ABROAD_PROVINCE = 30


def validate_ci(value: Any) -> bool:
    """
    Check whether a value is a valid cédula number.

    Args:
        value: Candidate text; non-strings are never valid

    Returns:
        True if format, province, third digit and check digit are valid
    """
    if not isinstance(value, str) or not CI_PATTERN.fullmatch(value):
        return False

    digits = [int(c) for c in value]

    province = digits[0] * 10 + digits[1]
    if not (1 <= province <= MAX_PROVINCE or province == ABROAD_PROVINCE):
        return False

    if digits[2] >= 6:
        return False

    total = 0
    for digit, coefficient in zip(digits[:9], COEFFICIENTS):
        product = digit * coefficient
        total += product - 9 if product > 9 else product

    return (10 - total % 10) % 10 == digits[9]
