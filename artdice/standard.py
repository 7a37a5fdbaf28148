from .dice import Die, Side, Symbol

PIP_NAME = "Pip"


def pip() -> Symbol:
    return Symbol(PIP_NAME)


def n_sided(n: int) -> Die:
    """Side i of the die carries i+1 pips, so a d6 reads 1 through 6."""
    symbol = pip()
    return Die(Side([symbol] * (i + 1)) for i in range(n))


def d4() -> Die:
    return n_sided(4)


def d6() -> Die:
    return n_sided(6)


def d8() -> Die:
    return n_sided(8)


def d10() -> Die:
    return n_sided(10)


def d12() -> Die:
    return n_sided(12)


def d20() -> Die:
    return n_sided(20)
