"""Tests for the command dispatch table."""

from __future__ import annotations

from pi.prompt.commands import CommandTable


def make_table() -> CommandTable:
    return CommandTable({"Hello": lambda: "hi\n"})


class TestCommandTable:
    def test_known_command(self) -> None:
        assert make_table()("Hello", list("Hello"), []) == "hi\nHello executed.\n"

    def test_surrounding_whitespace_ignored(self) -> None:
        assert make_table()(" Hello ", list(" Hello "), []) == "hi\nHello executed.\n"

    def test_unknown_command(self) -> None:
        assert make_table()("Nope", list("Nope"), []) == "Nope not found.\n"

    def test_quit_is_case_insensitive(self) -> None:
        table = make_table()
        assert table("quit", list("quit"), []) == "quit"
        assert table("QUIT", list("QUIT"), []) == "quit"

    def test_register_and_names(self) -> None:
        table = make_table()
        table.register("Other", lambda: "")
        assert table.names == ["Hello", "Other"]
        assert "Other" in table
        assert "Missing" not in table

    def test_unannounced_command_answers_with_its_output_only(self) -> None:
        table = make_table()
        table.register("Batch", lambda: "done\n", announce=False)
        assert table("Batch", list("Batch"), []) == "done\n"

    def test_reregistering_restores_announcement(self) -> None:
        table = make_table()
        table.register("Batch", lambda: "done\n", announce=False)
        table.register("Batch", lambda: "done\n")
        assert table("Batch", list("Batch"), []) == "done\nBatch executed.\n"
