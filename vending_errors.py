"""
Errors raised by the coin engine and the vending machine.

Every error here is recoverable: the caller reports it and the machine keeps
running with its coin inventory exactly as it was before the failed call.
"""


class VendingError(Exception):
    """Base class for all vending machine errors."""


class InvalidArgument(VendingError, ValueError):
    """Negative count or amount, or a malformed denomination."""


class UnsupportedDenomination(VendingError, ValueError):
    """The coin is not one of the denominations the machine accepts."""

    def __init__(self, denomination):
        super().__init__(f"Denomination {denomination} is not supported.")
        self.denomination = denomination


class CoinOverflow(VendingError):
    """A coin slot would hold more coins than it can count."""


class ChangeNotPossible(VendingError):
    """No combination of the coins in stock makes up the change."""


class PaymentNotAccepted(VendingError):
    """The inserted coins could not be taken into the coin inventory."""


class ProductNotFound(VendingError):
    def __init__(self, product_id):
        super().__init__(f"Product ({product_id}) not found in inventory.")
        self.product_id = product_id


class InsufficientFunds(VendingError):
    def __init__(self, shortfall):
        super().__init__(f"Not enough money. Please insert {shortfall}")
        self.shortfall = shortfall
