"""
Vending machine that accepts payment and dispenses products.

Prices and amounts are money (Decimal); the coin ledger underneath works in
whole coin units. The DenominationConverter sits between the two.
"""

import logging
from collections import namedtuple

from coin_change import ChangeSolver
from coin_ledger import CoinLedger
from denomination import DenominationConverter
from vending_config import read_coins, read_products
from vending_errors import InsufficientFunds, InvalidArgument, ProductNotFound

logger = logging.getLogger(__name__)

Product = namedtuple('Product', ['product_id', 'name', 'price', 'units'])


class VendingMachine(object):

    def __init__(self, ledger, converter):
        if ledger is None:
            raise InvalidArgument("A coin ledger is required.")
        if converter is None:
            raise InvalidArgument("A denomination converter is required.")
        self.ledger = ledger
        self.converter = converter
        self._products = {}

    @property
    def products(self):
        return dict(sorted(self._products.items()))

    @property
    def coin_denominations(self):
        return sorted(self.ledger.denominations)

    @property
    def amount_inserted(self):
        return self.converter.to_amount(self.ledger.total_inserted)

    def load_product(self, product_id, name, price):
        """Load a product into the machine. Replaces the price if it already exists."""
        units = self.converter.to_denomination(price)
        if units is None:
            raise InvalidArgument(f"Price {price!r} for product ({product_id}) is not a valid amount.")
        product = Product(product_id, name, self.converter.to_amount(units), units)
        self._products[product_id] = product
        return product

    def load_coins(self, denomination, count):
        return self.ledger.load_coins(denomination, count)

    def insert_coin(self, denomination):
        self.ledger.insert_coin(denomination)

    def refund(self):
        """Refund the money inserted. Returns the coins handed back."""
        return self.ledger.refund()

    def purchase(self, product_id):
        """
        Buy the product with the given id using the coins inserted.

        Returns the change paid out (denomination -> count). Raises
        ProductNotFound, InsufficientFunds or a coin ledger error otherwise,
        in which case the inserted coins stay in the machine for another try
        or a refund.
        """
        product = self._products.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)

        inserted = self.ledger.total_inserted
        if inserted < product.units:
            shortfall = self.converter.to_amount(product.units - inserted)
            logger.warning(f"Not enough money. Please insert {shortfall}")
            raise InsufficientFunds(shortfall)

        change = self.ledger.accept_payment_and_dispense_change(inserted - product.units)
        logger.info(f"Product ({product_id}) is dispensed.")
        return change


def build_machine(config):
    """Create a vending machine from the settings and load its coins and products."""
    coin_settings = config['coins']
    ledger = CoinLedger(
        coin_settings['denominations'],
        solver=ChangeSolver(),
        max_count=coin_settings['max_count'],
    )
    machine = VendingMachine(ledger, DenominationConverter(coin_settings['scale']))

    for denomination, count in read_coins(config['files']['coins']):
        if not ledger.accepts(denomination):
            logger.warning(f"Skipping coins of unsupported denomination {denomination}.")
            continue
        if count < 0:
            logger.warning(f"Skipping negative coin count for denomination {denomination}.")
            continue
        if not machine.load_coins(denomination, count):
            logger.warning(f"Could not load {count} coins of denomination {denomination}.")

    for product_id, name, price in read_products(config['files']['products']):
        try:
            machine.load_product(product_id, name, price)
        except InvalidArgument as e:
            logger.error(f"Skipping product: {e}")

    logger.debug(ledger.format_inventory())
    return machine
