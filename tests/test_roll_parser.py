"""Tests for the dice expression grammar."""

import pytest

import artdice.functions as functions
from artdice.dice import DiceError, Die
from artdice.roll import DiceRollError, RollCollectionType, RollLimitError
from artdice.roll_parser import parse


def test_bare_pool_is_a_probability_table():
    """A pool on its own should be read as probtab(pool)."""
    result = parse("2d4")
    assert isinstance(result, functions.ProbTab)
    pool = result.args[0]
    assert len(pool.dice) == 2
    assert str(result) == "probtab(2d4)"


def test_probability_of_target():
    """p() should return the probability of a target."""
    assert parse("p(2d4, exactly 5 Pip)").evaluate() == 0.25
    assert parse("p(d4 + d4, exactly 2 Pip)").evaluate() == 0.0625


def test_keep_highest():
    """Policies should be applied to the pool."""
    result = parse("p(3d4 keep highest 2, exactly 6 Pip)")
    pool = result.args[0]
    assert pool.coll_type is RollCollectionType.KEEP_HIGHEST
    assert pool.n == 2
    assert result.evaluate() == 0.25
    assert parse("p(3d4 keep highest 2, exactly 2 Pip)").evaluate() == 0.015625


@pytest.mark.parametrize(
    "policy,expected",
    [
        ("keep lowest 2", RollCollectionType.KEEP_LOWEST),
        ("drop highest 1", RollCollectionType.DROP_HIGHEST),
        ("drop lowest 1", RollCollectionType.DROP_LOWEST),
    ],
)
def test_policy_keywords(policy, expected):
    """Every keep/drop form should parse to its collection type."""
    pool = parse("3d6 %s" % policy).args[0]
    assert pool.coll_type is expected


def test_compare():
    """compare() should pit two pools against each other."""
    compare = parse("compare(d8, 2d4)").evaluate()
    assert (compare.wins, compare.ties, compare.losses) == (48, 16, 64)


def test_inline_dice_and_conjunction():
    """Custom dice can be written inline and targets joined with and."""
    result = parse("p(2d{[A], [B], [A, B], []}, exactly 1 A and at least 1 B)")
    assert result.evaluate() == 0.375


def test_target_over_symbol_set():
    """Targets may count several symbols together."""
    result = parse("p(d{[A], [B], [A, B], []}, exactly 2 (A, B))")
    assert result.evaluate() == 0.25


def test_of_restricts_symbols():
    """Symbols left out of `of` never reach the outcome."""
    result = parse("p(2d{[A], [B], [A, B], []} of A, at most 0 B)")
    assert result.evaluate() == 1.0
    assert str(result.args[0]) == "2d{[A], [B], [A, B], []} of A"


def test_quoted_symbols():
    """Quoted strings allow symbol names with spaces."""
    result = parse('p(d{["Big Hit"], []}, exactly 1 "Big Hit")')
    assert result.evaluate() == 0.5


def test_named_dice():
    """d{name} should look the die up in the given mapping."""
    coin = Die.on_load([["Heads"], ["Tails"]])
    result = parse("p(3d{coin}, at least 2 Heads)", dice={"coin": coin})
    assert result.evaluate() == 0.5
    assert str(result.args[0]) == "3d{coin}"


def test_unknown_named_die():
    """Referencing an undefined die is an input error."""
    with pytest.raises(DiceRollError):
        parse("d{nothing}")


def test_invalid_inline_die():
    """A one-sided inline die should be rejected."""
    with pytest.raises(DiceError):
        parse("d{[A]}")


@pytest.mark.parametrize("text", ["", "2d4 keep", "p(2d4,", "exactly 2 Pip", "2d4 @"])
def test_syntax_errors(text):
    """Malformed input should raise DiceRollError."""
    with pytest.raises(DiceRollError):
        parse(text)


def test_unknown_function():
    """Unknown function names should be rejected."""
    with pytest.raises(DiceRollError):
        parse("roll(2d4)")


def test_wrong_arguments():
    """Functions should check how many arguments they get and of what kind."""
    with pytest.raises(DiceRollError):
        parse("p(2d4)")
    with pytest.raises(DiceRollError):
        parse("compare(2d4, exactly 1 Pip)")


def test_policy_larger_than_pool():
    """Keeping more dice than the pool has fails when evaluated."""
    result = parse("p(d4 keep highest 2, exactly 1 Pip)")
    with pytest.raises(DiceRollError):
        result.evaluate()


def test_max_rolls_is_passed_to_pools():
    """The roll limit should apply to every pool in the expression."""
    result = parse("3d4", max_rolls=10)
    with pytest.raises(RollLimitError):
        result.evaluate()
