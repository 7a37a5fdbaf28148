import io
import typing

import pandas
import plotly.express as px

from .dice import Die, Symbol
from .roll import (
    DiceRollError,
    RollCollectionPolicy,
    RollCollectionType,
    RollProbabilities,
    RollTarget,
)


class _Number(float):
    def __repr__(self) -> str:
        result = f"{float(self):.2f}"
        if result.endswith(".00"):
            result = result[:-3]
        return result


class _Percentage(float):
    def __repr__(self) -> str:
        return f"{_Number(self*100)}%"


class ImageResult:
    def __init__(self, data: bytes) -> None:
        self.data = data

    def __repr__(self) -> str:
        return "<image, %s bytes>" % len(self.data)


class DiceTerm:
    def __init__(self, count: int, die: Die, label: str) -> None:
        self.count = count
        self.die = die
        self.label = label

    def __repr__(self) -> str:
        return ("" if self.count == 1 else str(self.count)) + self.label


class Pool:
    """A pool of dice together with the policy used to read the roll."""

    def __init__(
        self,
        terms: typing.Sequence[DiceTerm],
        coll_type: RollCollectionType = RollCollectionType.COLLECT_ALL,
        n: int = 0,
        symbols: typing.Optional[typing.Sequence[Symbol]] = None,
        max_rolls: typing.Optional[int] = None,
    ) -> None:
        self.terms = tuple(terms)
        self.coll_type = coll_type
        self.n = n
        self.explicit_symbols = None if symbols is None else tuple(symbols)
        self.max_rolls = max_rolls
        self._probabilities: typing.Optional[RollProbabilities] = None

    @property
    def dice(self) -> typing.List[Die]:
        return [term.die for term in self.terms for _ in range(term.count)]

    @property
    def symbols(self) -> typing.Tuple[Symbol, ...]:
        if self.explicit_symbols is not None:
            return self.explicit_symbols
        result: typing.List[Symbol] = []
        for die in self.dice:
            for symbol in die.unique_symbols():
                if symbol not in result:
                    result.append(symbol)
        return tuple(result)

    def policy(self) -> RollCollectionPolicy:
        return RollCollectionPolicy(self.coll_type, self.n, self.symbols)

    def probabilities(self) -> RollProbabilities:
        if self._probabilities is None:
            self._probabilities = RollProbabilities(
                self.dice, self.policy(), max_rolls=self.max_rolls
            )
        return self._probabilities

    def __repr__(self) -> str:
        result = " + ".join(str(term) for term in self.terms)
        if self.coll_type is not RollCollectionType.COLLECT_ALL:
            result += " %s %s" % (self.coll_type.value, self.n)
        if self.explicit_symbols is not None:
            if len(self.explicit_symbols) == 1:
                result += " of %s" % self.explicit_symbols[0]
            else:
                result += " of (%s)" % ", ".join(str(s) for s in self.explicit_symbols)
        return result


class Targets:
    def __init__(self, *targets: RollTarget) -> None:
        self.targets = tuple(targets)

    def __repr__(self) -> str:
        return " and ".join(str(target) for target in self.targets)


def probability_frame(probabilities: RollProbabilities) -> pandas.DataFrame:
    records = sorted(
        (
            (outcome.total_count(), str(outcome), count)
            for outcome, count in probabilities.occurrences.items()
        ),
        key=lambda record: (record[0], record[1]),
    )
    data = pandas.DataFrame.from_records(
        records, columns=["total", "outcome", "occurrences"]
    )
    data["probability"] = data["occurrences"] / probabilities.total
    return data


class FnOp:
    ARGS: typing.Tuple[type, ...] = (Pool,)
    VARARGS = False

    @classmethod
    def name(cls) -> str:
        raise NotImplementedError

    @classmethod
    def description(cls) -> str:
        return ""

    @classmethod
    def help(cls) -> str:
        return "No help text available for this function."

    def __init__(self, *args) -> None:
        if self.VARARGS:
            expected = self.ARGS * max(1, len(args))
        else:
            expected = self.ARGS
        if len(args) != len(expected):
            raise DiceRollError(
                "'%s' expected %s arguments, got %s"
                % (self.name(), len(self.ARGS), len(args))
            )
        for arg, kind in zip(args, expected):
            if not isinstance(arg, kind):
                raise DiceRollError(
                    "'%s' expected %s, got '%s'"
                    % (self.name(), "a dice pool" if kind is Pool else "targets", arg)
                )
        self.args = args

    def evaluate(self):
        raise NotImplementedError

    def __repr__(self):
        return "%s(%s)" % (self.name(), ", ".join(str(arg) for arg in self.args))


class ProbabilityOf(FnOp):
    ARGS = (Pool, Targets)

    def evaluate(self):
        pool, targets = self.args
        return _Percentage(pool.probabilities().get_odds(targets.targets))

    @classmethod
    def name(cls):
        return "p"

    @classmethod
    def description(cls) -> str:
        return "probability of hitting a target"

    @classmethod
    def help(cls) -> str:
        return """p(<pool>, <targets>)

Arguments:
    pool - A dice pool, optionally with a keep/drop policy.
    targets - One or more targets joined with `and`.

Result:
    Returns the probability that a roll of the pool meets
    every target at once.

Examples:
    artdice roll "p(2d4, exactly 5 Pip)"
    artdice roll "p(3d4 keep highest 2, at least 6 Pip)"
    artdice roll "p(2d{[A], [B], [A, B], []}, exactly 1 A and at least 1 B)"
"""


class Compare(FnOp):
    ARGS = (Pool, Pool)

    def evaluate(self):
        lhs, rhs = self.args
        return lhs.probabilities().roll_against(rhs.probabilities())

    @classmethod
    def name(cls):
        return "compare"

    @classmethod
    def description(cls) -> str:
        return "odds of one pool beating another"

    @classmethod
    def help(cls) -> str:
        return """compare(<pool>, <pool>)

Arguments:
    pool - Two dice pools.

Result:
    Rolls both pools and compares the total number of
    symbols each one collects. Returns the odds that the
    first pool wins, ties and loses.

Examples:
    artdice roll "compare(d8, 2d4)"
    artdice roll "compare(3d6 drop lowest 1, 2d6)"
"""


class ProbTab(FnOp):
    def evaluate(self):
        return probability_frame(self.args[0].probabilities())

    @classmethod
    def name(cls):
        return "probtab"

    @classmethod
    def description(cls) -> str:
        return "print probability table"

    @classmethod
    def help(cls) -> str:
        return """probtab(<pool>)

Arguments:
    pool - A dice pool

Result:
    Prints every distinct outcome of the pool with the
    number of rolls producing it and its probability.
    Evaluating a bare pool does the same.

Examples:
    artdice roll "probtab(2d4)"
    artdice roll "2d{fate}"
"""


class Mean(FnOp):
    def evaluate(self):
        return _Number(self.args[0].probabilities().mean())

    @classmethod
    def name(cls):
        return "mean"

    @classmethod
    def description(cls) -> str:
        return "average number of symbols"

    @classmethod
    def help(cls) -> str:
        return """mean(<pool>)

Arguments:
    pool - A dice pool

Result:
    Returns the average number of symbols the pool
    collects.

Examples:
    artdice roll "mean(d6)"
    artdice roll "mean(4d6 drop lowest 1)"
"""


class Min(FnOp):
    def evaluate(self):
        return _Number(self.args[0].probabilities().min())

    @classmethod
    def name(cls):
        return "min"

    @classmethod
    def description(cls) -> str:
        return "fewest symbols a pool can collect"

    @classmethod
    def help(cls) -> str:
        return """min(<pool>)

Arguments:
    pool - A dice pool

Result:
    Returns the smallest possible number of symbols
    the pool collects.

Examples:
    artdice roll "min(3d4)"
"""


class Max(FnOp):
    def evaluate(self):
        return _Number(self.args[0].probabilities().max())

    @classmethod
    def name(cls):
        return "max"

    @classmethod
    def description(cls) -> str:
        return "most symbols a pool can collect"

    @classmethod
    def help(cls) -> str:
        return """max(<pool>)

Arguments:
    pool - A dice pool

Result:
    Returns the largest possible number of symbols
    the pool collects.

Examples:
    artdice roll "max(3d4 keep lowest 1)"
"""


class Plot(FnOp):
    VARARGS = True

    def figure(self):
        KEY_VALUE = "symbols"
        value_tables: typing.Dict[str, typing.Dict[int, int]] = {}
        totals: typing.Dict[str, int] = {}
        for pool in self.args:
            probabilities = pool.probabilities()
            value_tables[str(pool)] = probabilities.value_table()
            totals[str(pool)] = probabilities.total

        possible_values = set()
        for value_table in value_tables.values():
            possible_values.update(value_table.keys())

        possible_values = sorted(possible_values)
        records = [tuple(str(x) for x in possible_values)]
        record_labels = [KEY_VALUE]

        for label, value_table in value_tables.items():
            record = []
            for value in possible_values:
                record.append(value_table.get(value, 0) / totals[label])
            records.append(tuple(record))
            record_labels.append(label)

        data = pandas.DataFrame.from_records(zip(*records), columns=record_labels)
        fig = px.bar(data, x=data.columns[0], y=data.columns[1:], barmode="overlay")
        fig.update_xaxes(title_text="symbols collected")
        fig.update_yaxes(title_text="probability", tickformat="%")
        return fig

    def evaluate(self):
        stream = io.BytesIO()
        self.figure().write_image(file=stream, format="png")
        return ImageResult(stream.getvalue())

    @classmethod
    def name(cls):
        return "plot"

    @classmethod
    def description(cls) -> str:
        return "produce a probability graph"

    @classmethod
    def help(cls) -> str:
        return """plot(<pool>, ...)

Arguments:
    pool - One or more dice pools

Result:
    Produces a graph comparing how many symbols each
    of the given pools collects.

Examples:
    artdice roll "plot(2d6)"
    artdice roll "plot(d8, 2d4, 3d4 keep highest 2)"
"""


NAMES_TO_FUNCTIONS: typing.Dict[str, typing.Type[FnOp]] = {
    fn.name(): fn
    for fn in (
        ProbabilityOf,
        Compare,
        ProbTab,
        Mean,
        Min,
        Max,
        Plot,
    )
}


def resolve_function_call(name: str, args: typing.Sequence) -> FnOp:
    name = name.lower()
    if name in NAMES_TO_FUNCTIONS:
        return NAMES_TO_FUNCTIONS[name](*args)
    else:
        raise DiceRollError("unknown function %s" % name)
