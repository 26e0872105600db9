from decimal import Decimal

import pytest

from fxconverter.schemas import ConversionFailure
from fxconverter.services.validation import is_valid_amount, validate_amount


@pytest.mark.parametrize("raw", ["100", "0.01", "1000000", "1000000000", " 42.5 "])
def test_validate_amount_accepts_positive_numbers(raw: str) -> None:
    assert validate_amount(raw)
    assert is_valid_amount(raw) is True


@pytest.mark.parametrize(
    ("raw", "failure"),
    [
        ("", ConversionFailure.empty_input),
        ("   ", ConversionFailure.empty_input),
        ("abc", ConversionFailure.not_a_number),
        ("12abc", ConversionFailure.not_a_number),
        ("NaN", ConversionFailure.not_a_number),
        ("Infinity", ConversionFailure.not_a_number),
        ("0", ConversionFailure.non_positive),
        ("-10", ConversionFailure.non_positive),
        ("1000000001", ConversionFailure.too_large),
    ],
)
def test_validate_amount_rejects_invalid_inputs(raw: str, failure: ConversionFailure) -> None:
    result = validate_amount(raw)
    assert not result
    assert result.failure == failure
    assert result.value is None
    assert is_valid_amount(raw) is False


def test_validate_amount_returns_parsed_value() -> None:
    assert validate_amount("1234.50").value == Decimal("1234.50")


def test_validate_amount_honours_custom_maximum() -> None:
    assert validate_amount("500", max_amount=100).failure == ConversionFailure.too_large
    assert validate_amount("100", max_amount=100)
