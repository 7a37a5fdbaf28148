"""Tests for the artdice command line and settings loading."""

import pytest

import artdice.__main__ as cli
import artdice.functions as functions
from artdice.dice import DiceError


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    """Keep any artdice.yaml in the real working directory out of the tests."""
    monkeypatch.chdir(tmp_path)


def _write(path, text):
    path.write_text(text)
    return str(path)


def test_parse_args_roll():
    """roll should collect the whole expression."""
    args = cli._parse_args(["roll", "p(2d4,", "exactly", "5", "Pip)", "-o", "out.png"])
    assert args.command == "roll"
    assert args.expr == ["p(2d4,", "exactly", "5", "Pip)"]
    assert args.output == "out.png"
    assert args.settings is None
    assert args.verbose is False


def test_parse_args_requires_a_command():
    """Running without a command is a usage error."""
    with pytest.raises(SystemExit) as excinfo:
        cli._parse_args([])
    assert excinfo.value.code == 2


def test_default_settings():
    """The packaged defaults should be loaded when nothing overrides them."""
    settings = cli.load_settings()
    assert settings["max_rolls"] == 1000000
    assert settings["log_level"] == "WARNING"
    assert set(cli.load_dice(settings)) == {"fate", "coin"}


def test_local_settings_override_defaults(tmp_path):
    """artdice.yaml in the working directory should override single keys."""
    _write(tmp_path / "artdice.yaml", "max_rolls: 10\n")
    settings = cli.load_settings()
    assert settings["max_rolls"] == 10
    assert settings["plot_file"] == "plot.png"


def test_explicit_settings_file(tmp_path):
    """--settings should take precedence over artdice.yaml."""
    _write(tmp_path / "artdice.yaml", "max_rolls: 10\n")
    path = _write(tmp_path / "other.yaml", "max_rolls: null\n")
    assert cli.load_settings(path)["max_rolls"] is None


def test_settings_must_be_a_mapping(tmp_path):
    """A settings file holding a list is rejected."""
    path = _write(tmp_path / "bad.yaml", "- 1\n- 2\n")
    with pytest.raises(DiceError):
        cli.load_settings(path)


def test_malformed_named_die():
    """Bad dice in settings should name the offending die."""
    with pytest.raises(DiceError, match="broken"):
        cli.load_dice({"dice": {"broken": [["Hit"]]}})


def test_roll_prints_result(capsys):
    """roll should echo the input and print the result."""
    assert cli.main(["roll", "p(2d4, exactly 5 Pip)"]) == 0
    out = capsys.readouterr().out
    assert "Input: p(2d4, exactly 5 Pip)" in out
    assert "Result: 25%" in out


def test_roll_prints_probability_table(capsys):
    """A bare pool prints its probability table."""
    assert cli.main(["roll", "d4"]) == 0
    out = capsys.readouterr().out
    assert "Input: probtab(d4)" in out
    assert "probability" in out
    assert "0.25" in out


def test_roll_named_die_from_settings(capsys):
    """Named dice from the default settings are available."""
    assert cli.main(["roll", "p(4d{fate},", "at", "least", "1", "Plus)"]) == 0
    assert "Result: 80.25%" in capsys.readouterr().out


def test_roll_respects_max_rolls(tmp_path, capsys):
    """Pools beyond the configured limit should fail with an input error."""
    path = _write(tmp_path / "limit.yaml", "max_rolls: 10\n")
    assert cli.main(["--settings", path, "roll", "3d4"]) == 1
    assert "Error in input" in capsys.readouterr().err


def test_roll_reports_input_errors(capsys):
    """Invalid expressions should produce an error and exit status 1."""
    assert cli.main(["roll", "d{[A]}"]) == 1
    assert "Error in input: die must have at least 2 sides" in capsys.readouterr().err


def test_roll_writes_images(tmp_path, monkeypatch, capsys):
    """Image results should be written to the output file."""
    monkeypatch.setattr(
        functions.Plot, "evaluate", lambda self: functions.ImageResult(b"png bytes")
    )
    output = tmp_path / "chart.png"
    assert cli.main(["roll", "plot(d8, 2d4)", "--output", str(output)]) == 0
    assert output.read_bytes() == b"png bytes"
    assert "image saved to %s" % output in capsys.readouterr().out


def test_missing_settings_file(capsys):
    """A missing settings file is reported, not raised."""
    assert cli.main(["--settings", "does-not-exist.yaml", "dice"]) == 1
    assert "does-not-exist.yaml" in capsys.readouterr().err


def test_unknown_log_level(tmp_path, capsys):
    """An invalid log level in settings is an input error."""
    path = _write(tmp_path / "log.yaml", "log_level: LOUD\n")
    assert cli.main(["--settings", path, "dice"]) == 1
    assert "unknown log level" in capsys.readouterr().err


def test_help_lists_functions(capsys):
    """help without arguments lists every function."""
    assert cli.main(["help"]) == 0
    out = capsys.readouterr().out
    for name in functions.NAMES_TO_FUNCTIONS:
        assert name in out


def test_help_for_one_function(capsys):
    """help <fn> prints that function's help text."""
    assert cli.main(["help", "compare"]) == 0
    assert "compare(<pool>, <pool>)" in capsys.readouterr().out
    assert cli.main(["help", "nope"]) == 1


def test_dice_lists_named_dice(tmp_path, capsys):
    """dice prints the named dice as YAML."""
    path = _write(tmp_path / "dice.yaml", "dice:\n  coin: [[Heads], [Tails]]\n")
    assert cli.main(["--settings", path, "dice"]) == 0
    assert capsys.readouterr().out == "coin:\n- [Heads]\n- [Tails]\n"
