import functools
import typing


class DiceError(ValueError):
    pass


@functools.total_ordering
class Symbol:
    """A named marking printed on a die face, such as "Pip" or "Star"."""

    def __init__(self, name: str) -> None:
        name = str(name).strip()
        if not name:
            raise DiceError("symbol name cannot be empty")
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def __eq__(self, other) -> bool:
        if not isinstance(other, Symbol):
            return NotImplemented
        return self._name == other._name

    def __lt__(self, other: "Symbol") -> bool:
        if not isinstance(other, Symbol):
            return NotImplemented
        return self._name < other._name

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        return self._name


class Side:
    def __init__(self, symbols: typing.Iterable[Symbol] = ()) -> None:
        self._symbols = tuple(symbols)

    @property
    def symbols(self) -> typing.Tuple[Symbol, ...]:
        return self._symbols

    def count(self, symbol: Symbol) -> int:
        return self._symbols.count(symbol)

    def __len__(self) -> int:
        return len(self._symbols)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Side):
            return NotImplemented
        return self._symbols == other._symbols

    def __hash__(self) -> int:
        return hash(self._symbols)

    def __repr__(self) -> str:
        return "[%s]" % ", ".join(str(symbol) for symbol in self._symbols)


class Die:
    """
    A die is an ordered collection of at least two sides. Each side is
    equally likely to come up.
    """

    def __init__(self, sides: typing.Iterable[Side]) -> None:
        sides = tuple(sides)
        if len(sides) < 2:
            raise DiceError("die must have at least 2 sides, got %s" % len(sides))
        self._sides = sides

    @property
    def sides(self) -> typing.Tuple[Side, ...]:
        return self._sides

    def __len__(self) -> int:
        return len(self._sides)

    def unique_symbols(self) -> typing.List[Symbol]:
        unique: typing.List[Symbol] = []
        for side in self._sides:
            for symbol in side.symbols:
                if symbol not in unique:
                    unique.append(symbol)
        return unique

    def average_of(self, symbol: Symbol) -> float:
        return sum(side.count(symbol) for side in self._sides) / len(self._sides)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Die):
            return NotImplemented
        return self._sides == other._sides

    def __hash__(self) -> int:
        return hash(self._sides)

    def __repr__(self) -> str:
        return "d{%s}" % ", ".join(str(side) for side in self._sides)

    @classmethod
    def on_load(cls, raw_data) -> "Die":
        if not isinstance(raw_data, (list, tuple)):
            raise DiceError("die must be a list of sides, got %r" % (raw_data,))
        sides = []
        for raw_side in raw_data:
            if raw_side is None:
                raw_side = []
            if not isinstance(raw_side, (list, tuple)):
                raise DiceError("side must be a list of symbols, got %r" % (raw_side,))
            sides.append(Side(Symbol(name) for name in raw_side))
        return Die(sides)

    @classmethod
    def on_save(cls, die: "Die"):
        return [[symbol.name for symbol in side.symbols] for side in die.sides]
