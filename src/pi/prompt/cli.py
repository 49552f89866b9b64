"""CLI entry point for the pi-prompt demo. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from pi.prompt.commands import CommandTable
from pi.prompt.config import PromptConfig
from pi.prompt.prompt import run
from pi.prompt.terminal import TerminalError

STARTUP_MESSAGE = (
    'You can "Regress" all methods or Tab to cycle through and auto-complete '
    'method handles. Type "quit" to quit.'
)


# ---------------------------------------------------------------------------
# Demo handlers
# ---------------------------------------------------------------------------

def hello_world() -> str:
    return "Hello World!\n"


def goodbye_world() -> str:
    return "Goodbye World!\n"


def this_method() -> str:
    return 'You called this method ("ThisMethod")!\n'


def build_table() -> CommandTable:
    """The demo commands, plus ``Regress`` which runs every other one."""
    handlers = {
        "HelloWorld": hello_world,
        "GoodbyeWorld": goodbye_world,
        "ThisMethod": this_method,
    }
    table = CommandTable(handlers)

    def regress() -> str:
        output = [handler() for handler in handlers.values()]
        return "".join(output) + "completed regression\n"

    table.register("Regress", regress, announce=False)
    return table


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

@click.command()
@click.option("--prompt", default="prompt> ", show_default=True, help="Prompt text")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write logs to this file")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="info",
    help="Log level (with --log-file)",
)
@click.option("--tab-width", type=int, default=4, show_default=True, help="Spaces inserted for a pasted tab")
@click.option("--no-paste-detection", is_flag=True, help="Always commit on Enter")
def main(prompt, log_file, log_level, tab_width, no_paste_detection):
    """Interactive line-editor demo with history and tab completion."""
    if log_file:
        # stderr shares the raw-mode screen, so logs only go to a file
        logging.basicConfig(
            filename=log_file,
            level=getattr(logging, log_level.upper()),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
    else:
        logging.basicConfig(handlers=[logging.NullHandler()])

    table = build_table()
    config = PromptConfig(tab_width=tab_width, detect_paste=not no_paste_detection)
    try:
        run(table, prompt, STARTUP_MESSAGE, table.names, config=config)
    except KeyboardInterrupt:
        click.echo()
        sys.exit(130)
    except TerminalError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
