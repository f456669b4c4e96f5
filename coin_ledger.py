"""
Coin ledger: the coins owned by the machine and the coins the current customer
has inserted.

Coin values are whole numbers in the smallest currency unit (5 for a 5 cent
coin). Converting to and from real money happens outside this module.
"""

import logging
from threading import RLock

from coin_change import ChangeSolver
from vending_errors import (
    ChangeNotPossible,
    CoinOverflow,
    InvalidArgument,
    PaymentNotAccepted,
    UnsupportedDenomination,
    VendingError,
)

logger = logging.getLogger(__name__)

# Largest number of coins a single slot can count.
MAX_COIN_COUNT = 2 ** 31 - 1


class CoinLedger(object):
    """
    Holds the coin inventory and the coins inserted but not yet accepted.

    Inserted coins are kept apart from the inventory until a purchase goes
    through, so they can always be handed back untouched by a refund.
    """

    def __init__(self, denominations=(), solver=None, max_count=MAX_COIN_COUNT):
        if max_count < 0:
            raise InvalidArgument(f"Coin slot capacity cannot be negative, got {max_count}.")
        self._solver = solver if solver is not None else ChangeSolver()
        self._max_count = max_count
        self._lock = RLock()
        self._inventory = {}
        self._inserted = []
        self.initialise(*denominations)

    def initialise(self, *denominations):
        """Accept exactly these denominations. All stored coins are removed."""
        for denomination in denominations:
            _check_denomination(denomination)
        with self._lock:
            self._inventory = {d: 0 for d in sorted(set(denominations))}
            self._inserted = []

    @property
    def denominations(self):
        return list(self._inventory)

    @property
    def inventory(self):
        """Copy of the coin inventory (denomination -> count)."""
        with self._lock:
            return dict(self._inventory)

    @property
    def inserted(self):
        """Copy of the coins inserted so far, in insertion order."""
        with self._lock:
            return list(self._inserted)

    @property
    def total_inserted(self):
        # Recounted on every read so a failed purchase can never leave a stale total.
        with self._lock:
            return sum(self._inserted)

    def accepts(self, denomination):
        return denomination in self._inventory

    def insert_coin(self, denomination):
        """Insert a single coin. It waits here until the payment is accepted."""
        _check_denomination(denomination)
        with self._lock:
            if not self.accepts(denomination):
                raise UnsupportedDenomination(denomination)
            self._inserted.append(denomination)

    def load_coins(self, denomination, count):
        """
        Bulk load coins into the inventory.

        Returns False, leaving the inventory as it was, when the slot cannot
        hold that many coins.
        """
        _check_denomination(denomination)
        with self._lock:
            if not self.accepts(denomination):
                raise UnsupportedDenomination(denomination)
            if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                raise InvalidArgument(f"Coin count must be a non-negative integer, got {count!r}.")
            try:
                self._inventory[denomination] = self._added(self._inventory, denomination, count)
            except CoinOverflow as e:
                logger.error(str(e))
                return False
            return True

    def refund(self):
        """Hand back every coin currently inserted. Returns the coins handed back."""
        with self._lock:
            refunded = []
            while self._inserted:
                coin = self._inserted.pop()
                logger.info(f"Dispensing 1 of {coin} denomination.")
                refunded.append(coin)
            return refunded

    def accept_payment_and_dispense_change(self, change):
        """
        Accept the inserted coins and pay out ``change`` from the inventory.

        Accepting and paying out are a single call so change can never leave
        the machine without the payment being taken first. The change is
        worked out against the inventory as it was before the payment, so a
        customer is never handed their own coins back as change.

        Returns the coins paid out (denomination -> count). On any failure the
        inventory and the inserted coins are left exactly as they were.
        """
        with self._lock:
            if not isinstance(change, int) or change < 0:
                raise InvalidArgument(f"Change must be a non-negative integer, got {change!r}.")
            if change > self.total_inserted:
                raise InvalidArgument("Cannot return change that is more than the payment amount.")

            coins_to_return = self._solver.calculate(dict(self._inventory), change)
            if coins_to_return is None:
                raise ChangeNotPossible("Change required is not possible using coins in current inventory.")
            self._check_plan(coins_to_return, change)

            # Work on a copy and swap it in at the end: no partial credit.
            inventory = self._accept_payment()
            self._dispense_change(inventory, coins_to_return)

            self._inventory = inventory
            self._inserted = []
            logger.debug(self.format_inventory())
            return coins_to_return

    def try_accept_payment_and_dispense_change(self, change):
        """Same as accept_payment_and_dispense_change, reporting True or False."""
        try:
            self.accept_payment_and_dispense_change(change)
        except VendingError as e:
            logger.error(str(e))
            return False
        return True

    def format_inventory(self):
        lines = ["{0:>15} {1:>5}".format("Denomination", "Count")]
        for denomination, count in self.inventory.items():
            lines.append(f"{denomination:>15} {count:>5}")
        return "\n".join(lines)

    def _accept_payment(self):
        inventory = dict(self._inventory)
        for coin in reversed(self._inserted):
            try:
                inventory[coin] = self._added(inventory, coin, 1)
            except CoinOverflow:
                raise PaymentNotAccepted(f"Coin slot for denomination of {coin} is full.")
        return inventory

    def _dispense_change(self, inventory, coins):
        for denomination, count in coins.items():
            # The plan was checked against the inventory before the payment
            # was added, and accepting a payment only adds coins.
            inventory[denomination] -= count
            if count:
                logger.info(f"Dispensing {count} of {denomination} denomination.")

    def _check_plan(self, coins, change):
        # A plan the inventory cannot cover is refused before anything is committed.
        for denomination, count in coins.items():
            if denomination not in self._inventory:
                raise ChangeNotPossible(f"Coin of denomination ({denomination}) is not supported.")
            if count < 0 or self._inventory[denomination] < count:
                raise ChangeNotPossible(
                    f"Not enough coin of denomination ({denomination}). "
                    f"{self._inventory[denomination]} is available but {count} is needed."
                )
        if sum(d * c for d, c in coins.items()) != change:
            raise ChangeNotPossible(f"Coins chosen do not add up to {change}.")

    def _added(self, inventory, denomination, count):
        total = inventory[denomination] + count
        if total > self._max_count:
            raise CoinOverflow(
                f"Coin slot for denomination of {denomination} cannot hold {total} coins "
                f"(limit {self._max_count})."
            )
        return total


def _check_denomination(denomination):
    if not isinstance(denomination, int) or isinstance(denomination, bool) or denomination <= 0:
        raise InvalidArgument(f"Denomination must be a positive integer, got {denomination!r}.")
