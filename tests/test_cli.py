"""Tests for the demo CLI."""

from __future__ import annotations

from click.testing import CliRunner

from pi.prompt.cli import STARTUP_MESSAGE, build_table, main
from pi.prompt.prompt import run

from .virtual_terminal import VirtualTerminal


class TestDemoTable:
    def test_names(self) -> None:
        assert build_table().names == ["HelloWorld", "GoodbyeWorld", "ThisMethod", "Regress"]

    def test_hello_world(self) -> None:
        table = build_table()
        assert table("HelloWorld", [], []) == "Hello World!\nHelloWorld executed.\n"

    def test_regress_runs_every_other_command(self) -> None:
        output = build_table()("Regress", [], [])
        assert output == (
            "Hello World!\n"
            "Goodbye World!\n"
            'You called this method ("ThisMethod")!\n'
            "completed regression\n"
        )

    def test_session_with_completion(self) -> None:
        vt = VirtualTerminal(columns=120)
        table = build_table()
        vt.type_text("This\t\nquit\n")
        run(table, "prompt> ", STARTUP_MESSAGE, table.names, terminal=vt)
        assert vt.screen()[:6] == [
            STARTUP_MESSAGE,
            "prompt> ThisMethod",
            'You called this method ("ThisMethod")!',
            "ThisMethod executed.",
            "prompt> quit",
            "GoodBye!",
        ]


class TestMain:
    def test_help(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "--log-file" in result.output
        assert "--prompt" in result.output

    def test_requires_a_terminal(self) -> None:
        result = CliRunner().invoke(main, [])
        assert result.exit_code == 1
        assert "not a terminal" in result.output
