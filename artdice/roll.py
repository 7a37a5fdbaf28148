import enum
import fractions
import logging
import types
import typing

from .counter import ItemCounter
from .dice import DiceError, Die, Side, Symbol
from .product import MultiCartesianProduct

logger = logging.getLogger(__name__)


class DiceRollError(DiceError):
    pass


class RollLimitError(DiceRollError):
    pass


def _ratio(part: int, whole: int) -> fractions.Fraction:
    if whole == 0:
        return fractions.Fraction(0)
    return fractions.Fraction(part, whole)


class RollTargetType(enum.Enum):
    EXACTLY = "exactly"
    AT_LEAST = "at least"
    AT_MOST = "at most"


class RollTarget:
    """A threshold on the combined count of one or more symbols."""

    def __init__(
        self,
        target_type: RollTargetType,
        amount: int,
        symbols: typing.Iterable[Symbol],
    ) -> None:
        if amount < 0:
            raise DiceRollError("target amount cannot be negative, got %s" % amount)
        self.target_type = target_type
        self.amount = amount
        self.symbols = tuple(symbols)

    @classmethod
    def exactly_n_of(cls, n: int, symbols: typing.Iterable[Symbol]) -> "RollTarget":
        return cls(RollTargetType.EXACTLY, n, symbols)

    @classmethod
    def at_least_n_of(cls, n: int, symbols: typing.Iterable[Symbol]) -> "RollTarget":
        return cls(RollTargetType.AT_LEAST, n, symbols)

    @classmethod
    def at_most_n_of(cls, n: int, symbols: typing.Iterable[Symbol]) -> "RollTarget":
        return cls(RollTargetType.AT_MOST, n, symbols)

    def matches(self, outcome: ItemCounter) -> bool:
        count = sum(outcome.get_count(symbol) for symbol in self.symbols)
        if self.target_type is RollTargetType.EXACTLY:
            return count == self.amount
        elif self.target_type is RollTargetType.AT_LEAST:
            return count >= self.amount
        else:
            return count <= self.amount

    def __repr__(self) -> str:
        return "%s %s %s" % (self.target_type.value, self.amount, _symbols_repr(self.symbols))


def _symbols_repr(symbols: typing.Sequence[Symbol]) -> str:
    if len(symbols) == 1:
        return str(symbols[0])
    return "(%s)" % ", ".join(str(symbol) for symbol in symbols)


class RollCollectionType(enum.Enum):
    COLLECT_ALL = "collect all"
    KEEP_HIGHEST = "keep highest"
    KEEP_LOWEST = "keep lowest"
    DROP_HIGHEST = "drop highest"
    DROP_LOWEST = "drop lowest"


class RollCollectionPolicy:
    """
    Decides which rolled sides count toward the outcome of a roll.

    Sides are ranked by how many of the policy's symbols they show, highest
    first. Sides with equal scores stay in the order their dice were given.
    Symbols outside the policy's set never reach the outcome.
    """

    def __init__(
        self,
        coll_type: RollCollectionType,
        n: int,
        symbols: typing.Iterable[Symbol],
    ) -> None:
        if n < 0:
            raise DiceRollError("cannot %s %s dice" % (coll_type.value, n))
        self.coll_type = coll_type
        self.n = n
        self.symbols = tuple(symbols)
        self._symbol_set = frozenset(self.symbols)

    @classmethod
    def collect_all(cls, symbols: typing.Iterable[Symbol]) -> "RollCollectionPolicy":
        return cls(RollCollectionType.COLLECT_ALL, 0, symbols)

    @classmethod
    def keep_highest_n_of(
        cls, n: int, symbols: typing.Iterable[Symbol]
    ) -> "RollCollectionPolicy":
        return cls(RollCollectionType.KEEP_HIGHEST, n, symbols)

    @classmethod
    def keep_lowest_n_of(
        cls, n: int, symbols: typing.Iterable[Symbol]
    ) -> "RollCollectionPolicy":
        return cls(RollCollectionType.KEEP_LOWEST, n, symbols)

    @classmethod
    def drop_highest_n_of(
        cls, n: int, symbols: typing.Iterable[Symbol]
    ) -> "RollCollectionPolicy":
        return cls(RollCollectionType.DROP_HIGHEST, n, symbols)

    @classmethod
    def drop_lowest_n_of(
        cls, n: int, symbols: typing.Iterable[Symbol]
    ) -> "RollCollectionPolicy":
        return cls(RollCollectionType.DROP_LOWEST, n, symbols)

    def validate(self, pool_size: int) -> None:
        if self.n > pool_size:
            raise DiceRollError(
                "cannot %s %s of %s dice" % (self.coll_type.value, self.n, pool_size)
            )

    def collect_symbols(self, roll: typing.Sequence[Side]) -> typing.List[Symbol]:
        self.validate(len(roll))
        filtered = [
            [symbol for symbol in side.symbols if symbol in self._symbol_set]
            for side in roll
        ]
        # sorted() stays stable with reverse=True
        ranked = sorted(filtered, key=len, reverse=True)
        n = self.n
        if self.coll_type is RollCollectionType.COLLECT_ALL:
            selected = ranked
        elif self.coll_type is RollCollectionType.KEEP_HIGHEST:
            selected = ranked[:n]
        elif self.coll_type is RollCollectionType.KEEP_LOWEST:
            selected = ranked[len(ranked) - n :]
        elif self.coll_type is RollCollectionType.DROP_HIGHEST:
            selected = ranked[n:]
        else:
            selected = ranked[: len(ranked) - n]
        return [symbol for side in selected for symbol in side]

    def __repr__(self) -> str:
        if self.coll_type is RollCollectionType.COLLECT_ALL:
            return "collect all of %s" % _symbols_repr(self.symbols)
        return "%s %s of %s" % (self.coll_type.value, self.n, _symbols_repr(self.symbols))


class RollCompare:
    def __init__(self, wins: int, ties: int, losses: int) -> None:
        self.wins = wins
        self.ties = ties
        self.losses = losses
        self.total = wins + ties + losses

    def win_odds(self) -> float:
        return float(_ratio(self.wins, self.total))

    def tie_odds(self) -> float:
        return float(_ratio(self.ties, self.total))

    def loss_odds(self) -> float:
        return float(_ratio(self.losses, self.total))

    def __repr__(self) -> str:
        return "win %.2f%%, tie %.2f%%, loss %.2f%%" % (
            self.win_odds() * 100,
            self.tie_odds() * 100,
            self.loss_odds() * 100,
        )


class RollProbabilities:
    """
    The exact distribution of outcomes for one roll of a pool of dice.

    Every combination of sides is enumerated once, the policy picks which
    symbols count, and equal outcomes are merged into a single entry with an
    integer occurrence count. Probabilities are only turned into floats when
    a query returns.
    """

    def __init__(
        self,
        dice: typing.Sequence[Die],
        policy: RollCollectionPolicy,
        max_rolls: typing.Optional[int] = None,
    ) -> None:
        dice = tuple(dice)
        if len(dice) == 0:
            raise DiceRollError("must include at least one die")
        policy.validate(len(dice))

        rolls = MultiCartesianProduct(die.sides for die in dice)
        if max_rolls is not None and len(rolls) > max_rolls:
            raise RollLimitError(
                "rolling %s dice has %s outcomes, more than the limit of %s"
                % (len(dice), len(rolls), max_rolls)
            )
        logger.debug("enumerating %s rolls of %s dice (%s)", len(rolls), len(dice), policy)

        occurrences: typing.Dict[ItemCounter, int] = {}
        for roll in rolls:
            outcome = ItemCounter(policy.collect_symbols(roll))
            occurrences.setdefault(outcome, 0)
            occurrences[outcome] += 1

        self._occurrences = occurrences
        self.total = sum(occurrences.values())
        logger.debug("found %s distinct outcomes", len(occurrences))

    @property
    def occurrences(self) -> typing.Mapping[ItemCounter, int]:
        return types.MappingProxyType(self._occurrences)

    def get_exact_odds(self, targets: typing.Iterable[RollTarget]) -> fractions.Fraction:
        targets = tuple(targets)
        hits = 0
        for outcome, count in self._occurrences.items():
            if all(target.matches(outcome) for target in targets):
                hits += count
        return _ratio(hits, self.total)

    def get_odds(self, targets: typing.Iterable[RollTarget]) -> float:
        return float(self.get_exact_odds(targets))

    def roll_against(self, other: "RollProbabilities") -> RollCompare:
        wins = ties = losses = 0
        for this_outcome, this_count in self._occurrences.items():
            this_value = this_outcome.total_count()
            for other_outcome, other_count in other._occurrences.items():
                other_value = other_outcome.total_count()
                weight = this_count * other_count
                if this_value > other_value:
                    wins += weight
                elif this_value == other_value:
                    ties += weight
                else:
                    losses += weight
        return RollCompare(wins, ties, losses)

    def value_table(self) -> typing.Dict[int, int]:
        result: typing.Dict[int, int] = {}
        for outcome, count in self._occurrences.items():
            value = outcome.total_count()
            result.setdefault(value, 0)
            result[value] += count
        return dict(sorted(result.items()))

    def mean(self) -> float:
        weighted = sum(value * count for value, count in self.value_table().items())
        return float(_ratio(weighted, self.total))

    def min(self) -> int:
        return min(self.value_table())

    def max(self) -> int:
        return max(self.value_table())
