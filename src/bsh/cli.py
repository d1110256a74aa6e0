"""
Command-line entry point.

One-shot commands map straight onto the repository, resolver and
executor. Running ``bsh`` without a subcommand starts the interactive
session.
"""

import argparse
import sys
from typing import List, Optional

from rich.box import ROUNDED
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from bsh import __version__
from bsh.config import resolve_store_path
from bsh.errors import (
    AlreadyExists, BshError, EXIT_INTERRUPTED, EXIT_USAGE, ValidationError,
)
from bsh.executor import Executor, ExitOutcome
from bsh.log import logger, setup_logging
from bsh.repository import Repository
from bsh.resolver import PromptFn, resolve_template

COMMANDS = {
    "add", "a", "update", "u", "run", "r", "delete", "d", "list", "l",
}
LIST_TYPES = ["categories", "aliases", "commands", "commands_with_aliases"]
# Global options that consume the following argument.
VALUE_OPTIONS = {"--config", "--shell"}


class UsageError(Exception):
    """Raised instead of exiting when the command line is invalid."""


class BshArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(f"{self.prog}: {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = BshArgumentParser(
        prog="bsh",
        description="bsh - organize and quickly run frequently used shell commands",
        epilog="Use <[name]> inside a command to be prompted for a value at run time.\n"
               "'bsh <category> <alias>' is shorthand for 'bsh run <category> <alias>'.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"bsh {__version__}")
    parser.add_argument("--config", type=str, help="Use alternative command store file")
    parser.add_argument("--shell", type=str, help="Shell used to run commands")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", parser_class=BshArgumentParser)

    add = subparsers.add_parser(
        "add", aliases=["a"],
        help="Add a command to a category, or create the category if no command is given",
    )
    add.add_argument("category", help="The category to add or to add the command to")
    add.add_argument("alias", nargs="?", help="The alias of the command to add")
    add.add_argument("cmd", nargs="?", metavar="command", help="The command to add")

    update = subparsers.add_parser(
        "update", aliases=["u"], help="Replace the command stored under an alias",
    )
    update.add_argument("category", help="The category of the command")
    update.add_argument("alias", help="The alias of the command")
    update.add_argument("cmd", metavar="command", help="The new command")

    run = subparsers.add_parser("run", aliases=["r"], help="Run a command from a category")
    run.add_argument("category", help="The category to run the command from")
    run.add_argument("alias", help="The alias of the command to run")

    delete = subparsers.add_parser(
        "delete", aliases=["d"],
        help="Remove a command, or the whole category if no alias is given",
    )
    delete.add_argument("category", help="The category to remove or remove the command from")
    delete.add_argument("alias", nargs="?", help="The alias of the command to remove")

    listing = subparsers.add_parser(
        "list", aliases=["l"], help="List categories, aliases or commands",
    )
    listing.add_argument("type", nargs="?", default="aliases", choices=LIST_TYPES,
                         help="What to list (default: aliases)")
    listing.add_argument("category", nargs="?", help="Restrict the listing to one category")

    return parser


def normalize_argv(argv: List[str]) -> List[str]:
    """Insert 'run' when the first positional is not a known subcommand."""
    argv = list(argv)
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in VALUE_OPTIONS:
            i += 2
            continue
        if arg.startswith("-"):
            i += 1
            continue
        if arg not in COMMANDS:
            argv.insert(i, "run")
        break
    return argv


def stdin_prompt(console: Console) -> PromptFn:
    """Prompt for each placeholder on its own line."""
    def ask(name: str) -> str:
        return Prompt.ask(f"Value for [cyan]{escape(f'<[{name}]>')}[/cyan]", console=console)
    return ask


class CommandDispatcher:
    """Executes one parsed command line against a repository."""

    def __init__(self, repository: Repository, executor: Executor,
                 console: Optional[Console] = None,
                 prompt_fn: Optional[PromptFn] = None):
        self.repository = repository
        self.executor = executor
        self.console = console or Console()
        self.prompt_fn = prompt_fn or stdin_prompt(self.console)

    def dispatch(self, args: argparse.Namespace) -> int:
        command = args.command
        if command in ("add", "a"):
            return self.add(args.category, args.alias, args.cmd)
        if command in ("update", "u"):
            return self.update(args.category, args.alias, args.cmd)
        if command in ("run", "r"):
            return self.run(args.category, args.alias)
        if command in ("delete", "d"):
            return self.delete(args.category, args.alias)
        if command in ("list", "l"):
            return self.list(args.type, args.category)
        raise UsageError(f"unknown command: {command}")

    def add(self, category: str, alias: Optional[str], command: Optional[str]) -> int:
        if alias is None and command is None:
            self.repository.add_category(category)
            self.console.print(f"[green]✓ Category '{escape(category)}' added[/green]")
            return 0
        if alias is None or command is None:
            raise UsageError(
                "When specifying an alias, a command must also be provided, and vice versa."
            )

        if self.repository.settings.strict_add and self.repository.has_alias(category, alias):
            raise AlreadyExists(
                f"Command '{alias}' already exists in category '{category}', "
                f"use 'bsh update' to replace it"
            )
        if not self.repository.has_category(category):
            self.console.print(
                f"[yellow]Adding category '{escape(category)}', because it does not exist[/yellow]"
            )
        self.repository.add_or_update_alias(category, alias, command)
        self.console.print(f"[green]✓ Command '{escape(alias)}' added to '{escape(category)}'[/green]")
        return 0

    def update(self, category: str, alias: str, command: str) -> int:
        self.repository.add_or_update_alias(category, alias, command)
        self.console.print(f"[green]✓ Command '{escape(category)}/{escape(alias)}' updated[/green]")
        return 0

    def run(self, category: str, alias: str) -> int:
        raw = self.repository.get(category, alias)
        try:
            command = resolve_template(raw, self.prompt_fn)
        except EOFError:
            raise ValidationError("No value given for placeholder") from None

        outcome: ExitOutcome = self.executor.execute(command)
        if not outcome.succeeded:
            self.console.print(
                f"[yellow]Command exited with status {outcome.exit_code}[/yellow]"
            )
        return outcome.exit_code

    def delete(self, category: str, alias: Optional[str]) -> int:
        if alias is None:
            self.repository.remove_category(category)
            self.console.print(f"[green]✓ Category '{escape(category)}' deleted[/green]")
        else:
            self.repository.remove_alias(category, alias)
            self.console.print(f"[green]✓ Command '{escape(category)}/{escape(alias)}' deleted[/green]")
        return 0

    def list(self, kind: str, category: Optional[str] = None) -> int:
        repository = self.repository
        if category is not None:
            repository.list_aliases(category)

        if kind == "categories":
            tree = Tree("[bold cyan]Categories[/bold cyan]", guide_style="cyan")
            for name in repository.list_categories():
                count = len(repository.list_aliases(name))
                tree.add(f"[bold blue]{escape(name)}[/bold blue] [dim]({count})[/dim]")
            self.console.print(tree)
            return 0

        rows = [
            entry for entry in repository.entries()
            if category is None or entry[0] == category
        ]
        title = "Commands" if category is None else f"Commands in '{category}'"
        table = Table(title=title, box=ROUNDED, border_style="cyan")
        if category is None:
            table.add_column("Category", style="blue")
        if kind in ("aliases", "commands_with_aliases"):
            table.add_column("Alias", style="bold green")
        table.add_column("Command", style="white")

        for entry_category, alias, command in rows:
            cells = [] if category is not None else [entry_category]
            if kind in ("aliases", "commands_with_aliases"):
                cells.append(alias)
            cells.append(command)
            table.add_row(*[Text(cell) for cell in cells])

        self.console.print(table)
        return 0


def run_tui(repository: Repository, executor: Executor, console: Console) -> int:
    from bsh.app import TuiApp
    from bsh.tui import TuiController

    controller = TuiController(repository=repository, executor=executor)
    TuiApp(controller, console=console).run()
    return 0


def run_cli(argv: Optional[List[str]] = None,
            console: Optional[Console] = None,
            err_console: Optional[Console] = None) -> int:
    """Parse *argv*, execute it and return the process exit code."""
    console = console or Console()
    err_console = err_console or Console(stderr=True)
    argv = sys.argv[1:] if argv is None else argv

    try:
        args = build_parser().parse_args(normalize_argv(argv))
    except UsageError as e:
        err_console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        return EXIT_USAGE

    setup_logging(args.verbose)

    try:
        store_path = resolve_store_path(args.config)
        logger.debug("Using command store %s", store_path)
        repository = Repository(store_path)
        settings = repository.settings.with_overrides(shell=args.shell)
        executor = Executor(shell=settings.resolve_shell(), interactive=settings.interactive)

        if args.command is None:
            return run_tui(repository, executor, console)
        return CommandDispatcher(repository, executor, console=console).dispatch(args)
    except UsageError as e:
        err_console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        return EXIT_USAGE
    except BshError as e:
        err_console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        return e.exit_code
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user.[/yellow]")
        return EXIT_INTERRUPTED


def main():
    """Main entry point for bsh."""
    try:
        sys.exit(run_cli())
    except Exception as e:
        console = Console(stderr=True)
        console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
