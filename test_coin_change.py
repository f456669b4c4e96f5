import pytest

from coin_change import ChangeSolver
from vending_errors import InvalidArgument

MAX_COINS = 2 ** 31 - 1


@pytest.fixture
def solver():
    """Fixture to create a fresh ChangeSolver for each test."""
    return ChangeSolver()


def total(plan):
    return sum(denomination * count for denomination, count in plan.items())


## Test Arguments
# -----------------------------------

def test_missing_inventory_rejected(solver):
    """No inventory at all is an argument error, not 'no change'."""
    with pytest.raises(InvalidArgument):
        solver.calculate(None, 10)

def test_negative_change_rejected(solver):
    with pytest.raises(InvalidArgument):
        solver.calculate({1: 1}, -1)

def test_fractional_change_rejected(solver):
    """Change is always worked out in whole coin units."""
    with pytest.raises(InvalidArgument):
        solver.calculate({1: 1}, 2.5)

def test_bad_inventory_rejected(solver):
    with pytest.raises(InvalidArgument):
        solver.calculate({0: 3}, 5)
    with pytest.raises(InvalidArgument):
        solver.calculate({5: -1}, 5)
    with pytest.raises(InvalidArgument):
        solver.calculate({"5": 1}, 5)
    with pytest.raises(InvalidArgument):
        solver.calculate({True: 5}, 5)
    with pytest.raises(InvalidArgument):
        solver.calculate({5: 1.5}, 5)

## Test Trivial Cases
# -----------------------------------

def test_zero_change_is_empty_plan(solver):
    assert solver.calculate({1: 1}, 0) == {}

def test_zero_change_with_no_coins(solver):
    """Nothing to pay out always succeeds, even with an empty machine."""
    assert solver.calculate({}, 0) == {}

def test_no_coins_gives_no_solution(solver):
    assert solver.calculate({}, 1) is None

def test_coins_larger_than_change(solver):
    assert solver.calculate({51: MAX_COINS}, 50) is None

def test_inventory_is_not_changed(solver):
    inventory = {25: 3, 10: 2, 5: 1}
    solver.calculate(inventory, 45)
    assert inventory == {25: 3, 10: 2, 5: 1}

## Test Single Coin Type
# -----------------------------------

@pytest.mark.parametrize("denomination", [1, 15, 29])
@pytest.mark.parametrize("multiple", [1, 3, 7])
def test_single_coin_type(solver, denomination, multiple):
    """A multiple of the only coin is paid out with exactly that many coins."""
    plan = solver.calculate({denomination: MAX_COINS}, multiple * denomination)
    assert plan == {denomination: multiple}

@pytest.mark.parametrize("denomination", [1, 15, 29])
@pytest.mark.parametrize("short_by", [1, 10, 100])
def test_single_coin_type_not_enough_coins(solver, denomination, short_by):
    plan = solver.calculate({denomination: 3}, 3 * denomination + short_by)
    assert plan is None

def test_single_coin_type_limited_stock(solver):
    assert solver.calculate({10: 4}, 40) == {10: 4}
    assert solver.calculate({10: 3}, 40) is None

def test_coin_with_none_in_stock_is_skipped(solver):
    assert solver.calculate({25: 0, 10: 5}, 50) == {10: 5}

## Test Multiple Coin Types
# -----------------------------------

@pytest.mark.parametrize("counts", [(0, 0, 1), (1, 2, 3), (3, 0, 2), (2, 3, 0), (3, 3, 3)])
def test_multiple_coin_types(solver, counts):
    """Any total that can be built from the coins is found again."""
    a, b, c = counts
    change = a * 17 + b * 13 + c * 7
    plan = solver.calculate({17: MAX_COINS, 13: MAX_COINS, 7: MAX_COINS}, change)
    assert plan is not None
    assert total(plan) == change

def test_multiple_coin_types_not_enough_coins(solver):
    assert solver.calculate({3: 1, 1: 2}, 6) is None

def test_multiple_coin_types_no_combination(solver):
    assert solver.calculate({5: 2, 2: 1, 1: 1}, 4) is None

def test_greedy_choice_would_fail(solver):
    """Largest coin first takes a 19 and gets stuck; the only answer is four 5s."""
    inventory = {19: 2, 13: 1, 5: 4}
    plan = solver.calculate(inventory, 20)
    assert plan == {5: 4}

def test_stock_limit_forces_smaller_coins(solver):
    """Only one quarter in stock, so the rest comes from dimes and nickels."""
    inventory = {25: 1, 10: 2, 5: 3}
    plan = solver.calculate(inventory, 50)
    assert total(plan) == 50
    assert all(count <= inventory[d] for d, count in plan.items())
    assert plan[25] == 1

def test_first_combination_found_is_kept(solver):
    """
    340 is closed by four dimes onto 300 before the quarter and nickel pair is
    ever tried. The result is exact but not the fewest coins possible.
    """
    plan = solver.calculate({200: 5, 100: 10, 25: 20, 10: 40, 5: 40}, 340)
    assert plan == {200: 1, 100: 1, 10: 4}

def test_same_inventory_same_plan(solver):
    inventory = {200: 5, 100: 10, 25: 20, 10: 40, 5: 40}
    assert solver.calculate(inventory, 185) == solver.calculate(dict(inventory), 185)

@pytest.mark.parametrize("change", range(0, 120))
def test_plans_respect_stock(solver, change):
    """Whatever comes back adds up exactly and never uses more coins than are in stock."""
    inventory = {50: 1, 20: 2, 10: 1, 5: 3, 2: 2}
    plan = solver.calculate(inventory, change)
    if plan is not None:
        assert total(plan) == change
        assert all(0 < count <= inventory[d] for d, count in plan.items())
