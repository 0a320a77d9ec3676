"""
Tests for CLI argument parser.
"""

import os
import pytest

from nimswitch.cli.parser import CLI
from nimswitch.core.exceptions import ValidationError


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_creation(self):
        cli = CLI()
        assert cli.parser is not None

    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLI().run(["--version"])

        assert exc_info.value.code == 0
        assert "nimswitch" in capsys.readouterr().out

    def test_unknown_option_exits_one(self, capsys):
        result = CLI().run(["--bogus"])

        assert result == 1
        captured = capsys.readouterr()
        assert "usage:" in captured.err.lower()
        assert "ERROR:" in captured.err


class TestCommandSelection:
    """Test how flags map to commands."""

    def test_no_arguments_lists(self):
        args = CLI().parse_args([])

        assert args.command == "list"

    def test_token_uses(self):
        args = CLI().parse_args(["2.2.0"])

        assert args.command == "use"
        assert args.token == "2.2.0"
        assert args.exec_command is None

    def test_previous_token(self):
        args = CLI().parse_args(["-"])

        assert args.command == "use"
        assert args.token == "-"

    def test_commit_token(self):
        assert CLI().parse_args(["#a1b2c3d"]).token == "#a1b2c3d"

    def test_stable(self):
        args = CLI().parse_args(["--stable"])

        assert args.command == "use"
        assert args.stable is True
        assert args.token is None

    def test_exec_takes_remaining_arguments(self):
        args = CLI().parse_args(["2.0", "-x", "nim", "c", "-d:release", "app.nim"])

        assert args.command == "use"
        assert args.token == "2.0"
        assert args.exec_command == ["nim", "c", "-d:release", "app.nim"]

    def test_exec_with_stable(self):
        args = CLI().parse_args(["--stable", "-x", "nimble", "build"])

        assert args.command == "use"
        assert args.exec_command == ["nimble", "build"]

    def test_link(self):
        args = CLI().parse_args(["--link", "local", "/src/Nim"])

        assert args.command == "link"
        assert args.link == ["local", "/src/Nim"]

    def test_remove_many(self):
        args = CLI().parse_args(["--remove", "2.0.0", "devel"])

        assert args.command == "remove"
        assert args.remove == ["2.0.0", "devel"]

    def test_which_many(self):
        args = CLI().parse_args(["--which", "nim", "nimble"])

        assert args.command == "which"
        assert args.which == ["nim", "nimble"]

    def test_global_options(self, tmp_path):
        args = CLI().parse_args(
            ["-v", "-y", "--dir", str(tmp_path), "--config", "c.yaml", "2.2.0"]
        )

        assert args.verbose is True
        assert args.yes is True
        assert args.store_dir == tmp_path
        assert str(args.config) == "c.yaml"


class TestArgumentErrors:
    @pytest.mark.parametrize(
        "argv, message",
        [
            (["2.2.0", "--stable"], "Conflicting arguments"),
            (["--remove", "2.0.0", "--which", "nim"], "Conflicting arguments"),
            (["--link", "a", "b", "2.2.0"], "Conflicting arguments"),
            (["-x", "nim"], "-x requires a version TOKEN or --stable"),
            (["2.2.0", "-x"], "-x requires a command to run"),
            ([""], "must not be empty"),
            (["--link", "only-one"], "expected 2 arguments"),
        ],
    )
    def test_invalid_combinations(self, argv, message):
        with pytest.raises(ValidationError, match=message):
            CLI().parse_args(argv)

    def test_run_reports_validation_error(self, capsys):
        result = CLI().run(["2.2.0", "--stable"])

        assert result == 1
        assert "ERROR: Conflicting arguments" in capsys.readouterr().err


@pytest.mark.posix
class TestRun:
    """End-to-end runs against a store on disk."""

    def test_list_empty_store(self, store_root, capsys):
        result = CLI().run(["--dir", str(store_root)])

        assert result == 0
        assert "No versions installed" in capsys.readouterr().out

    def test_store_from_environment(self, populated_store, clean_environ, capsys):
        result = CLI().run([])

        assert result == 0
        assert "2.0.8" in capsys.readouterr().out

    def test_switch_and_back(self, populated_store, capsys):
        cli = CLI(confirm=lambda question: False)
        root = str(populated_store)

        assert cli.run(["--dir", root, "2.0"]) == 0
        assert cli.run(["--dir", root, "2.2.0"]) == 0
        assert os.readlink(populated_store / "prev") == "nim-2.0.8"

        assert cli.run(["--dir", root, "-"]) == 0
        assert os.readlink(populated_store / "current") == "nim-2.0.8"
        assert os.readlink(populated_store / "prev") == "nim-2.2.0"
        assert "Nim Compiler Version 2.0.8" in capsys.readouterr().out

    def test_previous_without_history(self, populated_store, capsys):
        result = CLI().run(["--dir", str(populated_store), "-"])

        assert result == 1
        assert "No previous version" in capsys.readouterr().err
        assert not (populated_store / "current").is_symlink()

    def test_declined_install(self, populated_store, capsys):
        cli = CLI(confirm=lambda question: False)

        result = cli.run(["--dir", str(populated_store), "3.0.0"])

        assert result == 1
        assert "Version not installed: 3.0.0" in capsys.readouterr().err
        assert not (populated_store / "nim-3.0.0").exists()

    def test_exec_exit_code(self, populated_store):
        result = CLI().run(["--dir", str(populated_store), "2.0", "-x", "sh", "-c", "exit 4"])

        assert result == 4
        assert not (populated_store / "current").is_symlink()

    def test_missing_required_config(self, store_root, tmp_path, capsys):
        result = CLI().run(
            ["--dir", str(store_root), "--config", str(tmp_path / "missing.yaml")]
        )

        assert result == 1
        assert "Configuration file not found" in capsys.readouterr().err
