"""
Interactive terminal front-end.

Renders the controller's current state with rich and reads the user's
choice with inquirer. Every answer is translated into exactly one
controller event.
"""

import os
from typing import List, Optional, Tuple

import inquirer
from inquirer.themes import GreenPassion
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from bsh import __version__
from bsh import template as tpl
from bsh.tui import (
    Add, AliasDetail, AliasList, Answer, Back, CategoryList, Confirm,
    DeleteCategory, Delete, Edit, EditTemplateInput, Event, NewAliasInput,
    NewCategoryInput, PlaceholderPrompt, Quit, Run, Select, Submit,
    TuiController,
)

# Action rows mixed into list choices; values cannot collide with names
# because names never contain ":".
ADD = ":add"
DELETE = ":delete"
BACK = ":back"
QUIT = ":quit"
RUN = ":run"
EDIT = ":edit"


def literal(text: str) -> str:
    """Protect braces from inquirer's message templating."""
    return text.replace("{", "{{").replace("}", "}}")


class TuiApp:
    """Main loop driving a TuiController from inquirer prompts."""

    def __init__(self, controller: TuiController, console: Optional[Console] = None):
        self.controller = controller
        self.console = console or Console()
        self.theme = GreenPassion()

    def clear_screen(self):
        """Clear the screen in a cross-platform way."""
        os.system('cls' if os.name == 'nt' else 'clear')

    def print_header(self) -> None:
        header = Text.assemble(
            ("bsh ", "bold cyan"),
            ("Bash Shortcut Helper", "bold white"),
            (f" v{__version__}", "dim cyan")
        )
        self.console.print(Panel(header, border_style="cyan", padding=(1, 2)))

    def print_status(self) -> None:
        controller = self.controller
        state = controller.state
        crumbs = ["categories"]
        if hasattr(state, "category") and state.category:
            crumbs.append(state.category)
        if getattr(state, "alias", None):
            crumbs.append(state.alias)
        self.console.print(f"[dim]{escape(' › '.join(crumbs))}[/dim]\n")

        if controller.error:
            self.console.print(f"[bold red]Error: {escape(controller.error)}[/bold red]\n")
        elif controller.message:
            outcome = controller.last_outcome
            style = "yellow" if outcome is not None and not outcome.succeeded else "green"
            self.console.print(f"[{style}]{escape(controller.message)}[/{style}]\n")

    def run(self) -> None:
        """Loop until the controller reports the session has finished."""
        while not self.controller.finished:
            self.clear_screen()
            self.print_header()
            self.print_status()

            event = self.read_event()
            if event is None:
                continue

            outcome = self.controller.last_outcome
            self.controller.handle(event)
            if self.controller.last_outcome is not outcome:
                self.console.print("\n[dim]Press Enter to continue...[/dim]")
                input()

    def read_event(self) -> Optional[Event]:
        """Render the current state and return the user's answer as an event."""
        state = self.controller.state
        if isinstance(state, CategoryList):
            return self._category_list()
        if isinstance(state, AliasList):
            return self._alias_list(state)
        if isinstance(state, AliasDetail):
            return self._alias_detail(state)
        if isinstance(state, PlaceholderPrompt):
            return self._text(
                f"Value for <[{state.current}]> "
                f"({len(state.answered) + 1}/{len(state.answered) + len(state.pending)})"
            )
        if isinstance(state, Confirm):
            return self._confirm(state)
        if isinstance(state, NewCategoryInput):
            return self._text("Enter category name")
        if isinstance(state, NewAliasInput):
            if state.alias is None:
                return self._text(f"Enter alias for new command in '{state.category}'")
            return self._text(f"Enter command for '{state.alias}' (use <[name]> for placeholders)")
        if isinstance(state, EditTemplateInput):
            current = self.controller.repository.get(state.category, state.alias)
            return self._text(f"Edit command for '{state.alias}'", default=current)
        return None

    # -- prompts -------------------------------------------------------------

    def _choose(self, message: str, choices: List[Tuple[str, str]]) -> Optional[str]:
        questions = [
            inquirer.List(
                "choice",
                message=literal(message),
                choices=choices,
                carousel=True
            )
        ]
        answer = inquirer.prompt(questions, theme=self.theme)
        if not answer:
            return None
        return answer["choice"]

    def _text(self, message: str, default: str = "") -> Event:
        questions = [inquirer.Text("value", message=literal(message), default=literal(default))]
        answer = inquirer.prompt(questions, theme=self.theme)
        if answer is None:
            return Back()
        return Submit(answer["value"])

    def _pick_target(self, message: str, names: List[str]) -> Optional[Event]:
        if not names:
            self.controller.message = "Nothing to delete"
            return None
        choice = self._choose(message, [(name, name) for name in names])
        if choice is None:
            return None
        return Delete(choice)

    def _category_list(self) -> Optional[Event]:
        repository = self.controller.repository
        categories = repository.list_categories()
        choices = [
            (f"{name} ({len(repository.list_aliases(name))})", name)
            for name in categories
        ]
        choices += [
            ("+ Add category", ADD),
            ("✗ Delete category", DELETE),
            ("Quit", QUIT),
        ]
        choice = self._choose("Select category", choices)
        if choice is None or choice == QUIT:
            return Quit()
        if choice == ADD:
            return Add()
        if choice == DELETE:
            return self._pick_target("Select category to delete", categories)
        return Select(choice)

    def _alias_list(self, state: AliasList) -> Optional[Event]:
        repository = self.controller.repository
        aliases = repository.list_aliases(state.category)
        choices = [
            (f"{alias} → {repository.get(state.category, alias)}", alias)
            for alias in aliases
        ]
        choices += [
            ("+ Add command", ADD),
            ("✗ Delete command", DELETE),
            ("← Back", BACK),
        ]
        choice = self._choose(f"Commands in '{state.category}'", choices)
        if choice is None or choice == BACK:
            return Back()
        if choice == ADD:
            return Add()
        if choice == DELETE:
            return self._pick_target("Select command to delete", aliases)
        return Select(choice)

    def _alias_detail(self, state: AliasDetail) -> Event:
        raw = self.controller.repository.get(state.category, state.alias)
        self.console.print(Panel(
            Syntax(raw, "bash", word_wrap=True),
            title=Text(f"{state.category}/{state.alias}"),
            border_style="blue",
        ))
        names = tpl.placeholders(tpl.parse(raw))
        if names:
            self.console.print(f"[cyan]Placeholders:[/cyan] {escape(', '.join(names))}\n")

        choice = self._choose("Select action", [
            ("Run", RUN),
            ("Edit", EDIT),
            ("Delete", DELETE),
            ("← Back", BACK),
        ])
        if choice == RUN:
            return Run()
        if choice == EDIT:
            return Edit()
        if choice == DELETE:
            return Delete()
        return Back()

    def _confirm(self, state: Confirm) -> Event:
        action = state.action
        if isinstance(action, DeleteCategory):
            count = len(self.controller.repository.list_aliases(action.category))
            message = (f"Are you sure? This will delete category '{action.category}' "
                       f"and its {count} commands.")
        else:
            message = f"Are you sure you want to delete '{action.category}/{action.alias}'?"

        questions = [inquirer.Confirm("confirm", message=literal(message), default=False)]
        answer = inquirer.prompt(questions, theme=self.theme)
        if answer is None:
            return Back()
        return Answer(bool(answer["confirm"]))
