import pytest

from coin_ledger import CoinLedger
from denomination import DenominationConverter
from vending_console import VendingConsole
from vending_machine import VendingMachine


@pytest.fixture
def vm():
    machine = VendingMachine(CoinLedger([5, 10, 25, 100]), DenominationConverter(2))
    machine.load_coins(25, 4)
    machine.load_coins(5, 10)
    machine.load_product(1, "Diode", "0.75")
    machine.load_product(2, "Transistor", "1.50")
    return machine


def run_console(machine, *answers):
    """Drive the menu with scripted answers and return everything it printed."""
    replies = iter(answers)
    output = []
    VendingConsole(machine, read=lambda prompt: next(replies), write=output.append).run()
    return "\n".join(output)


def test_exit(vm):
    output = run_console(vm, "e")
    assert "Thanks for coming. Exiting...." in output

def test_unknown_option(vm):
    output = run_console(vm, "9", "E")
    assert "Please try again" in output

def test_help(vm):
    assert "coins.txt" in run_console(vm, "h", "E")

def test_insert_coins_then_buy(vm):
    """Insert a dollar, buy the diode and get a quarter back."""
    output = run_console(vm, "2", "100", "", "1", "1", "E")
    assert "You currently have: $1.00" in output
    assert "Product (1) is dispensed." in output
    assert "Returning 1 x $0.25" in output
    assert vm.ledger.total_inserted == 0
    assert vm.ledger.inventory[100] == 1

def test_invalid_denomination(vm):
    output = run_console(vm, "2", "7", "E")
    assert "Invalid denomination" in output
    assert vm.ledger.total_inserted == 0

def test_buy_without_enough_money(vm):
    output = run_console(vm, "2", "100", "", "1", "2", "E")
    assert "Not enough money. Please insert 0.50" in output
    assert vm.ledger.total_inserted == 100

def test_buy_unknown_product(vm):
    output = run_console(vm, "1", "8", "1", "x", "1", "", "E")
    assert "Product (8) not found in inventory." in output
    assert "Invalid product" in output

def test_refund(vm):
    output = run_console(vm, "2", "25", "10", "", "3", "E")
    assert "Returning $0.10" in output
    assert "Returning $0.25" in output
    assert vm.ledger.total_inserted == 0
