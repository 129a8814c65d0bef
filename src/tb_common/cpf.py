"""Brazilian CPF helpers: checksum validation and masking for display."""

import re

_NON_DIGITS = re.compile(r"\D")


def _digits(cpf: str) -> str:
    return _NON_DIGITS.sub("", cpf)


def _check_digit(digits: str, weight_start: int) -> int:
    total = sum(int(d) * w for d, w in zip(digits, range(weight_start, 1, -1)))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


def validate_cpf(cpf: str) -> bool:
    """Return True when the CPF has 11 digits, is not a repeated digit and both check digits match."""
    digits = _digits(cpf)
    if len(digits) != 11 or digits == digits[0] * 11:
        return False
    first = _check_digit(digits[:9], 10)
    second = _check_digit(digits[:10], 11)
    return digits[9] == str(first) and digits[10] == str(second)


def mask_cpf(cpf: str | None) -> str | None:
    """Mask a CPF for display: '52998224725' -> '***.982.247-**'."""
    if cpf is None:
        return None
    digits = _digits(cpf)
    if len(digits) != 11:
        return "***"
    return f"***.{digits[3:6]}.{digits[6:9]}-**"
