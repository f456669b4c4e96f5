"""Text menu front end for the vending machine."""

from vending_errors import VendingError

HELP_TEXT = """Coin Vending Machine
1. To change the accepted denominations and scale, edit vending_config.yaml.
2. To change the coins loaded into the machine, edit coins.txt.
3. To change the products available in the machine, edit products.txt."""


class VendingConsole(object):
    """
    Menu loop: buy, insert coin, refund, help, exit.

    ``read`` and ``write`` default to input() and print() and can be swapped
    out to drive the menu from a script.
    """

    def __init__(self, machine, read=input, write=print):
        self.machine = machine
        self.read = read
        self.write = write

    def run(self):
        self.write("My Vending Machine. Please buy something ...")

        while True:
            self.write("")
            self.write("Menu")
            self.write("1 - Buy Something")
            self.write("2 - Insert Coin")
            self.write("3 - Give me my money back")
            self.write("H - Help")
            self.write("E - Exit")
            self.write("")
            self.show_current_amount()
            choice = self.read("Please select an option: ").strip().upper()

            if choice == "1":
                self.purchase_menu()
            elif choice == "2":
                self.coin_menu()
            elif choice == "3":
                self.refund()
            elif choice == "H":
                self.write(HELP_TEXT)
            elif choice == "E":
                self.write("Thanks for coming. Exiting....")
                break
            else:
                self.write("Please try again")

    def purchase_menu(self):
        self.write("")
        self.write("Products")
        for product_id, product in self.machine.products.items():
            self.write(f"{product_id} - {product.name} (${product.price})")
        self.show_current_amount()

        choice = self.read("Please select a product to buy: ").strip()
        if not choice:
            return
        try:
            product_id = int(choice)
        except ValueError:
            self.write("Invalid product")
            return

        try:
            change = self.machine.purchase(product_id)
        except VendingError as e:
            self.write(str(e))
            return
        self.write(f"Product ({product_id}) is dispensed.")
        for denomination, count in sorted(change.items(), reverse=True):
            self.write(f"Returning {count} x {self.machine.converter.format(denomination)}")

    def coin_menu(self):
        """Keep taking coins until a blank or unknown entry."""
        while True:
            self.write("")
            self.write("Coins Denomination Supported.")
            for denomination in self.machine.coin_denominations:
                self.write(f"{denomination} - {self.machine.converter.format(denomination)}")
            self.write("")
            self.show_current_amount()

            choice = self.read("Select a denomination to insert: ").strip()
            try:
                denomination = int(choice)
            except ValueError:
                return
            try:
                self.machine.insert_coin(denomination)
            except VendingError:
                self.write("Invalid denomination")
                return

    def refund(self):
        coins = self.machine.refund()
        for coin in coins:
            self.write(f"Returning {self.machine.converter.format(coin)}")

    def show_current_amount(self):
        self.write(f"You currently have: ${self.machine.amount_inserted}")
