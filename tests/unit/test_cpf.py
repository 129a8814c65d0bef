"""Unit tests for CPF validation and masking."""

import pytest

from src.tb_common.cpf import mask_cpf, validate_cpf


@pytest.mark.parametrize("cpf", ["52998224725", "529.982.247-25"])
def test_valid_cpf(cpf: str) -> None:
    assert validate_cpf(cpf) is True


@pytest.mark.parametrize(
    "cpf",
    [
        "52998224726",   # wrong second check digit
        "52998224715",   # wrong first check digit
        "11111111111",   # repeated digit
        "1234567890",    # too short
        "",
    ],
)
def test_invalid_cpf(cpf: str) -> None:
    assert validate_cpf(cpf) is False


def test_mask_cpf() -> None:
    assert mask_cpf("52998224725") == "***.982.247-**"
    assert mask_cpf("529.982.247-25") == "***.982.247-**"


def test_mask_malformed_cpf() -> None:
    assert mask_cpf("123") == "***"


def test_mask_none() -> None:
    assert mask_cpf(None) is None
