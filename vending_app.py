"""
Coin vending machine simulator.

Panel front end: coin buttons, one button per product and a Return Coins
button, driven by a small state machine (waiting, add_coins, deliver_product,
count_change). Run with --console for the text menu instead.

    python vending_app.py [--config vending_config.yaml] [--console]
"""

import argparse
import logging
from time import sleep

import FreeSimpleGUI as sg

from vending_config import load_config
from vending_console import VendingConsole
from vending_errors import VendingError
from vending_machine import build_machine

logger = logging.getLogger(__name__)

PRODUCT_PREFIX = "product_"


class VendingController(object):
    """Turns panel events into calls on the vending machine."""

    def __init__(self, machine, dispense_delay=0.5):
        self.machine = machine
        self.dispense_delay = dispense_delay
        self.state = None
        self.states = {}
        self.event = ""
        self.coins_due = []         # coins waiting to drop into the return tray
        self.selected_product = None
        self.vend_successful = False

    def add_state(self, state):
        self.states[state.name] = state

    def go_to_state(self, state_name):
        if self.state:
            logger.debug(f'Exiting {self.state.name}')
            self.state.on_exit(self)
        self.state = self.states[state_name]
        logger.debug(f'Entering {self.state.name}')
        self.state.on_entry(self)

    def update(self):
        if self.state:
            self.state.update(self)

    def is_coin_event(self, event):
        return isinstance(event, str) and event.isdigit() and self.machine.ledger.accepts(int(event))

    def product_from_event(self, event):
        if isinstance(event, str) and event.startswith(PRODUCT_PREFIX):
            product_id = event[len(PRODUCT_PREFIX):]
            if product_id.isdigit():
                return int(product_id)
        return None

    def add_coin(self, event):
        self.machine.insert_coin(int(event))

    def balance(self):
        return f"${self.machine.amount_inserted}"

    def pause(self):
        if self.dispense_delay:
            sleep(self.dispense_delay)

    # This method is for the Return Coins button
    def button_action(self):
        self.event = 'RETURN'


class State(object):
    _NAME = ""
    def __init__(self):
        pass
    @property
    def name(self):
        return self._NAME
    def on_entry(self, controller):
        pass
    def on_exit(self, controller):
        pass
    def update(self, controller):
        pass


class WaitingState(State):
    _NAME = "waiting"
    def on_entry(self, controller):
        print("Waiting for coins. Insert funds or press Return Coins.")

    def update(self, controller):
        if controller.is_coin_event(controller.event):
            controller.add_coin(controller.event)
            controller.go_to_state('add_coins')
        controller.event = ""


class AddCoinsState(State):
    _NAME = "add_coins"
    def on_entry(self, controller):
        print(f"Current Balance: {controller.balance()}. Select item or press RETURN COINS.\n")

    def update(self, controller):
        event = controller.event
        product_id = controller.product_from_event(event)

        if event == "RETURN":
            controller.coins_due = controller.machine.refund()
            controller.go_to_state('count_change')
        elif controller.is_coin_event(event):
            controller.add_coin(event)
            self.on_entry(controller)
        elif product_id is not None:
            product = controller.machine.products.get(product_id)
            if product is None:
                print(f"Product {product_id} is not available.")
            elif controller.machine.amount_inserted < product.price:
                print(f"Insufficient funds. Need ${product.price}.\n")
            else:
                controller.selected_product = product_id
                controller.go_to_state('deliver_product')

        controller.event = ""


class DeliverProductState(State):
    _NAME = "deliver_product"

    def on_entry(self, controller):
        product = controller.machine.products[controller.selected_product]
        try:
            change = controller.machine.purchase(product.product_id)
        except VendingError as e:
            print(f"Error: {e}\n Returning to AddCoins.\n")
            controller.vend_successful = False
            return

        controller.coins_due = [d for d, count in sorted(change.items(), reverse=True) for _ in range(count)]
        print(f"Dispensing {product.name}...\n")
        controller.pause()
        print(f"{product.name} successfully dispensed!\n")
        controller.vend_successful = True

    def on_exit(self, controller):
        controller.selected_product = None

    def update(self, controller):
        if not controller.vend_successful:
            controller.go_to_state('add_coins')
        elif controller.coins_due:
            controller.go_to_state('count_change')
        else:
            controller.go_to_state('waiting')


class CountChangeState(State):
    _NAME = "count_change"

    def on_entry(self, controller):
        print("Dispensing Change...\n")
        total = sum(controller.coins_due)
        print(f"Change due: {controller.machine.converter.format(total)}\n")

    def update(self, controller):
        for coin in controller.coins_due:
            print(f"Returning {controller.machine.converter.format(coin)} coin...\n")
            controller.pause()
        controller.coins_due = []
        controller.go_to_state('waiting')


def create_controller(machine, dispense_delay=0.5):
    controller = VendingController(machine, dispense_delay)
    controller.add_state(WaitingState())
    controller.add_state(AddCoinsState())
    controller.add_state(DeliverProductState())
    controller.add_state(CountChangeState())
    controller.go_to_state('waiting')
    return controller


def build_layout(machine):
    # --- Coins Column Setup ---
    coin_col = []
    coin_col.append([sg.Text("Insert Coins", font=("Helvetica", 24), background_color='#2196F3', text_color='black', pad=(10, 10))])
    for denomination in machine.coin_denominations:
        button_text = f"Insert {machine.converter.format(denomination)}"
        button = sg.Button(button_text, key=str(denomination), size=(15, 2), font=("Helvetica", 18), button_color=('#1A335F', '#2196F3'))
        coin_col.append([button])

    # --- Products Column Setup ---
    select_col = []
    select_col.append([sg.Text("Select Item", font=("Helvetica", 24), background_color='#2196F3', text_color='black', pad=(10, 10))])
    for product_id, product in machine.products.items():
        button_text = f"{product.name}\n(${product.price})"
        select_col.append([sg.Button(button_text, key=f"{PRODUCT_PREFIX}{product_id}", size=(20, 2), font=("Helvetica", 12), button_color=('#1A335F', '#2196F3'))])

    # --- Layout Assembly ---
    return [
        [
            sg.Column(coin_col, vertical_alignment="TOP", element_justification='c', background_color='#0A1931', pad=(20, 20)),
            sg.VSeparator(),
            sg.Column(select_col, vertical_alignment="TOP", element_justification='c', background_color='#0A1931', pad=(20, 20), scrollable=True, expand_y=True)
        ],
        [sg.HorizontalSeparator()],
        [sg.Text("Balance: $0.00", key='BALANCE', font=("Helvetica", 18), background_color='#0A1931', text_color='white')],
        [
            sg.Button("Return Coins", key='RETURN', size=(40, 1), font=("Helvetica", 18), button_color=('white', '#D32F2F'))
        ]
    ]


def run_panel(machine, dispense_delay=0.5):
    controller = create_controller(machine, dispense_delay)
    sg.theme_background_color('#1A335F')
    window = sg.Window('Coin Vending Machine', build_layout(machine), background_color='#0A1931', finalize=True)

    while True:
        event, values = window.read(timeout=10)

        if event in (sg.WIN_CLOSED, 'Exit'):
            break

        if event == 'RETURN':
            controller.button_action()
        else:
            controller.event = event
        controller.update()

        window['BALANCE'].update(f"Balance: {controller.balance()}")
        controller.event = ""

    window.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Coin vending machine simulator")
    parser.add_argument('--config', default=None, help="Settings file (YAML)")
    parser.add_argument('--console', action='store_true', help="Use the text menu instead of the panel")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    logging.basicConfig(level=config['logging']['level'].upper(),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    machine = build_machine(config)
    if args.console:
        VendingConsole(machine).run()
    else:
        run_panel(machine, config['panel']['dispense_delay'])
    print("Normal exit")


# MAIN PROGRAM
if __name__ == "__main__":
    main()
