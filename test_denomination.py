from decimal import Decimal

import pytest

from denomination import DenominationConverter


@pytest.fixture
def converter():
    return DenominationConverter(scale=2)


def test_money_to_units(converter):
    assert converter.to_denomination(Decimal("0.25")) == 25
    assert converter.to_denomination("1.50") == 150
    assert converter.to_denomination(2) == 200
    assert converter.to_denomination(0.1) == 10

def test_units_to_money(converter):
    assert converter.to_amount(5) == Decimal("0.05")
    assert converter.to_amount(150) == Decimal("1.50")
    assert str(converter.to_amount(0)) == "0.00"

@pytest.mark.parametrize("value", ["-0.25", "0.125", "abc", "NaN", "Infinity", None])
def test_unconvertible_amounts(converter, value):
    """Anything that is not a whole number of units is refused rather than rounded."""
    assert converter.to_denomination(value) is None

def test_other_scales():
    assert DenominationConverter(scale=0).to_denomination("3") == 3
    assert DenominationConverter(scale=3).to_denomination("0.125") == 125
    assert DenominationConverter(scale=3).to_amount(1250) == Decimal("1.250")

def test_bad_scale():
    with pytest.raises(ValueError):
        DenominationConverter(scale=-1)

def test_format(converter):
    assert converter.format(75) == "$0.75"
