"""Conversion between money amounts and whole coin units."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


class DenominationConverter(object):
    """Scales money by 10**scale, so 0.25 becomes 25 at scale 2."""

    def __init__(self, scale=2):
        if not isinstance(scale, int) or scale < 0:
            raise ValueError(f"Scale must be a non-negative integer, got {scale!r}.")
        self.scale = scale
        self._factor = Decimal(10) ** scale
        self._quantum = Decimal(1).scaleb(-scale)

    def to_denomination(self, value):
        """
        Convert a money amount to units. Returns None if the amount is
        negative, not a number, or has more decimal places than the scale.
        """
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            return None
        if not amount.is_finite() or amount < 0:
            return None
        units = amount * self._factor
        if units != units.to_integral_value():
            return None
        return int(units)

    def to_amount(self, denomination):
        """Convert units back to a money amount."""
        return (Decimal(denomination) / self._factor).quantize(self._quantum, rounding=ROUND_HALF_UP)

    def format(self, denomination):
        return f"${self.to_amount(denomination)}"
