import os
import typing

import lark

import artdice.functions as functions
import artdice.standard as standard
from artdice.dice import Die, Side, Symbol
from artdice.roll import DiceRollError, RollCollectionType, RollTarget


@lark.v_args(inline=True)
class _RollParser(lark.Transformer):
    exactly = lambda self, n, symbols: RollTarget.exactly_n_of(n, symbols)
    at_least = lambda self, n, symbols: RollTarget.at_least_n_of(n, symbols)
    at_most = lambda self, n, symbols: RollTarget.at_most_n_of(n, symbols)
    targets = functions.Targets
    keep_highest = lambda self, n: (RollCollectionType.KEEP_HIGHEST, n)
    keep_lowest = lambda self, n: (RollCollectionType.KEEP_LOWEST, n)
    drop_highest = lambda self, n: (RollCollectionType.DROP_HIGHEST, n)
    drop_lowest = lambda self, n: (RollCollectionType.DROP_LOWEST, n)
    symbol_set = lambda self, *symbols: symbols
    symbol = Symbol
    quoted_symbol = lambda self, s: Symbol(s[1:-1])
    side = lambda self, *symbols: Side(symbols)
    blank_side = lambda self: Side()
    dice_sum = lambda self, *terms: terms
    args = lambda self, *args: args
    fn_call = lambda self, name, args: functions.resolve_function_call(
        str(name), args or ()
    )

    def __init__(
        self,
        dice: typing.Optional[typing.Mapping[str, Die]] = None,
        max_rolls: typing.Optional[int] = None,
    ) -> None:
        super().__init__()
        self.dice = dict(dice or {})
        self.max_rolls = max_rolls

    def INT(self, token) -> int:
        return int(token)

    def standard_dice(self, count, size):
        sides = int(size[1:])
        return functions.DiceTerm(
            1 if count is None else count, standard.n_sided(sides), "d%s" % sides
        )

    def inline_dice(self, count, *sides):
        die = Die(sides)
        return functions.DiceTerm(1 if count is None else count, die, str(die))

    def named_dice(self, count, name):
        name = str(name)
        if name not in self.dice:
            raise DiceRollError("unknown die %s" % name)
        return functions.DiceTerm(
            1 if count is None else count, self.dice[name], "d{%s}" % name
        )

    def pool(self, terms, policy, symbols):
        coll_type, n = (RollCollectionType.COLLECT_ALL, 0) if policy is None else policy
        return functions.Pool(terms, coll_type, n, symbols, max_rolls=self.max_rolls)


_grammar_file = os.path.join(os.path.dirname(__file__), "roll.lark")
with open(_grammar_file) as _f:
    _grammar = lark.Lark(_f, parser="lalr")


def parse(
    text: str,
    dice: typing.Optional[typing.Mapping[str, Die]] = None,
    max_rolls: typing.Optional[int] = None,
):
    try:
        result = _RollParser(dice, max_rolls).transform(_grammar.parse(text))
    except lark.exceptions.VisitError as e:
        raise e.orig_exc
    except lark.exceptions.LarkError as e:
        raise DiceRollError("syntax error:\n%s" % e)
    if isinstance(result, functions.Pool):
        return functions.ProbTab(result)
    return result
