import argparse
import logging
import os
import sys
import typing

import pandas
import yaml

import artdice.functions as roll_functions
import artdice.roll_parser as roll_parser
from artdice.dice import DiceError, Die

logger = logging.getLogger("artdice")

DEFAULT_SETTINGS_FILE = os.path.join(os.path.dirname(__file__), "settings.default.yaml")
LOCAL_SETTINGS_FILE = "artdice.yaml"


def _read_yaml(path: str) -> typing.Dict[str, typing.Any]:
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DiceError("settings file %s must contain a mapping" % path)
    return data


def load_settings(path: typing.Optional[str] = None) -> typing.Dict[str, typing.Any]:
    """
    Packaged defaults, overridden by the given file or, failing that, by
    artdice.yaml in the working directory. Overrides replace whole keys.
    """
    settings = _read_yaml(DEFAULT_SETTINGS_FILE)
    if path is None and os.path.exists(LOCAL_SETTINGS_FILE):
        path = LOCAL_SETTINGS_FILE
    if path is not None:
        settings.update(_read_yaml(path))
        logger.debug("loaded settings from %s", path)
    return settings


def load_dice(settings: typing.Dict[str, typing.Any]) -> typing.Dict[str, Die]:
    raw_dice = settings.get("dice") or {}
    if not isinstance(raw_dice, dict):
        raise DiceError("'dice' must map names to dice")
    result = {}
    for name, raw_die in raw_dice.items():
        try:
            result[str(name)] = Die.on_load(raw_die)
        except DiceError as e:
            raise DiceError("die %s: %s" % (name, e.args[0]))
    return result


def _log_level(settings: typing.Dict[str, typing.Any]) -> int:
    level = logging.getLevelName(str(settings.get("log_level", "WARNING")).upper())
    if not isinstance(level, int):
        raise DiceError("unknown log level %s" % settings.get("log_level"))
    return level


def roll_(args: argparse.Namespace, settings: typing.Dict[str, typing.Any]) -> int:
    result = roll_parser.parse(
        " ".join(args.expr),
        dice=load_dice(settings),
        max_rolls=settings.get("max_rolls"),
    )
    print("Input: %s" % result)
    rolled_result = result.evaluate()
    if isinstance(rolled_result, roll_functions.ImageResult):
        output = args.output or settings["plot_file"]
        with open(output, "wb") as f:
            f.write(rolled_result.data)
        logger.info("wrote %s bytes to %s", len(rolled_result.data), output)
        print("Result: image saved to %s" % output)
    elif isinstance(rolled_result, pandas.DataFrame):
        print("Result:\n%s" % rolled_result.to_string(index=False))
    else:
        print("Result: %s" % (rolled_result,))
    return 0


def rollhelp(args: argparse.Namespace, settings: typing.Dict[str, typing.Any]) -> int:
    if not args.fn:
        max_namelen = max(len(x) for x in roll_functions.NAMES_TO_FUNCTIONS.keys())
        for name, fn in sorted(roll_functions.NAMES_TO_FUNCTIONS.items()):
            print(name + " " * (max_namelen - len(name) + 2) + fn.description())
        print("\nType `artdice help <name>` to get help on the function <name>.")
        return 0

    status = 0
    for arg in args.fn:
        fn = roll_functions.NAMES_TO_FUNCTIONS.get(arg.lower())
        if fn is None:
            print("error: function %s not found." % arg, file=sys.stderr)
            status = 1
        else:
            print(fn.help())
    return status


def dice_(args: argparse.Namespace, settings: typing.Dict[str, typing.Any]) -> int:
    dice = load_dice(settings)
    if not dice:
        print("No named dice are defined.")
        return 0
    print(
        yaml.safe_dump(
            {name: Die.on_save(die) for name, die in dice.items()},
            default_flow_style=None,
            sort_keys=False,
        ),
        end="",
    )
    return 0


def _parse_args(argv: typing.Optional[typing.List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="artdice",
        description="Exact probabilities for pools of dice with symbols on their faces.",
    )
    parser.add_argument("--settings", help="settings file to read instead of artdice.yaml")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log debugging information"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    roll_parser_ = subparsers.add_parser(
        "roll",
        help="evaluate a dice expression",
        description="""Evaluates a dice expression. Pools are written like
        3d4, d8 + 2d6, 2d{[A], [B], [A, B], []} or d{fate}, optionally
        followed by `keep highest N` (or keep lowest, drop highest, drop
        lowest) and `of <symbols>`. A bare pool prints its probability table.
        Type `artdice help` for the list of functions.""",
    )
    roll_parser_.add_argument("expr", nargs="+", help="the expression to evaluate")
    roll_parser_.add_argument("-o", "--output", help="file to write images to")
    roll_parser_.set_defaults(func=roll_)

    help_parser = subparsers.add_parser("help", help="get or list functions for roll")
    help_parser.add_argument("fn", nargs="*", help="the functions to describe")
    help_parser.set_defaults(func=rollhelp)

    dice_parser = subparsers.add_parser("dice", help="list the named dice")
    dice_parser.set_defaults(func=dice_)

    return parser.parse_args(argv)


def main(argv: typing.Optional[typing.List[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        settings = load_settings(args.settings)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else _log_level(settings),
            format="%(levelname)s %(name)s: %(message)s",
        )
        return args.func(args, settings)
    except DiceError as e:
        print("Error in input: %s" % e.args[0], file=sys.stderr)
        return 1
    except (OSError, yaml.YAMLError) as e:
        print("error: %s" % e, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
