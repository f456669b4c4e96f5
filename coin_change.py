"""
Change calculation for a coin dispenser with a limited stock of each coin.

The dispenser cannot rely on "largest coin first": with only a few coins of
each kind in the tubes (or with odd denominations such as 19, 13 and 5) the
greedy choice can miss a combination that exists. Instead the change is built
up with dynamic programming over every sub-amount below the change required.

Base case: one coin type. Every multiple of the denomination, up to the number
of coins in stock, can be paid out.

Other coin types: every sub-amount already reachable stays reachable, and any
sub-amount that the current coin closes onto a reachable remainder becomes
reachable too. The search stops as soon as the change itself is reachable.
"""

import logging

from vending_errors import InvalidArgument

logger = logging.getLogger(__name__)


class ChangeSolver(object):
    """Works out which coins to pay out for a given change."""

    def calculate(self, inventory, amount):
        """
        Calculate the coins to return for ``amount`` using at most the coins
        held in ``inventory`` (denomination -> count). The inventory is only
        read, never changed.

        Returns a dict of denomination -> count summing exactly to ``amount``,
        or None when no combination of the coins in stock makes the change.
        """
        if inventory is None:
            raise InvalidArgument("Coin inventory is required.")
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise InvalidArgument(f"Change must be a whole number of units, got {amount!r}.")
        if amount < 0:
            raise InvalidArgument(f"Change cannot be negative, got {amount}.")
        for denomination, count in inventory.items():
            if not isinstance(denomination, int) or isinstance(denomination, bool) or denomination <= 0:
                raise InvalidArgument(f"Denomination must be a positive integer, got {denomination!r}.")
            if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                raise InvalidArgument(f"Coin count for {denomination} must be a non-negative integer, got {count!r}.")

        if amount == 0:
            return {}

        # Coins bigger than the change can never be part of it. Largest first
        # keeps the number of coins paid out low.
        denominations = sorted((d for d in inventory if d <= amount), reverse=True)
        if not denominations:
            logger.debug("No coin in stock is small enough for %d.", amount)
            return None

        table = _build_table(denominations, inventory, amount)
        if table is None:
            return None
        return _read_plan(table, denominations, amount)


class _ChangeTable(object):
    """
    Reachable sub-amounts found so far.

    For each sub-amount that can be paid out, remembers which coin type closed
    it and how many of that coin were used. A sub-amount is only ever filled in
    once: the first way found is the one kept.
    """

    def __init__(self, amount):
        self.coin_type = [None] * (amount + 1)
        self.coin_count = [0] * (amount + 1)
        self.found = [False] * (amount + 1)
        self.found[0] = True

    def has_result(self, amount):
        return self.found[amount]

    def record(self, coin_type, amount, count):
        self.found[amount] = True
        self.coin_type[amount] = coin_type
        self.coin_count[amount] = count


def _build_table(denominations, inventory, amount):
    table = _ChangeTable(amount)
    smallest = denominations[-1]

    for coin_type, denomination in enumerate(denominations):
        available = inventory[denomination]
        for target in range(amount, smallest - 1, -1):
            if table.has_result(target):
                continue

            # number of this coin needed to close target onto an earlier result
            count = 1
            paid = denomination
            while count <= available and target - paid >= 0:
                if table.has_result(target - paid):
                    table.record(coin_type, target, count)
                    if target == amount:
                        return table
                    break
                count += 1
                paid = count * denomination

    logger.debug("Change of %d cannot be made from %s.", amount, dict(inventory))
    return None


def _read_plan(table, denominations, amount):
    # Every remainder was closed by a coin type processed earlier, so walking
    # the coin types backwards visits each step of the chain in turn.
    plan = {}
    remaining = amount
    for coin_type in range(len(denominations) - 1, -1, -1):
        if remaining == 0:
            break
        if table.coin_type[remaining] != coin_type:
            continue
        count = table.coin_count[remaining]
        plan[denominations[coin_type]] = count
        remaining -= count * denominations[coin_type]
    return plan
