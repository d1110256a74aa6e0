"""
Navigation state machine for the interactive front-end.

States and events are plain frozen dataclasses. ``TuiController.handle``
looks up the transition for the current state type and applies it; the
rendering layer (``bsh.app``) only turns user input into events.
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Optional, Tuple, Union

from bsh import template as tpl
from bsh.errors import AlreadyExists, BshError
from bsh.executor import Executor, ExitOutcome
from bsh.log import logger
from bsh.repository import Repository, validate_name, validate_template
from bsh.resolver import resolve


# -- states -------------------------------------------------------------------

@dataclass(frozen=True)
class CategoryList:
    pass


@dataclass(frozen=True)
class AliasList:
    category: str


@dataclass(frozen=True)
class AliasDetail:
    category: str
    alias: str


@dataclass(frozen=True)
class PlaceholderPrompt:
    """Collecting placeholder values one at a time before running."""
    category: str
    alias: str
    template: str
    pending: Tuple[str, ...]
    answered: Tuple[Tuple[str, str], ...] = ()

    @property
    def current(self) -> str:
        return self.pending[0]


@dataclass(frozen=True)
class DeleteCategory:
    category: str


@dataclass(frozen=True)
class DeleteAlias:
    category: str
    alias: str


ConfirmAction = Union[DeleteCategory, DeleteAlias]


@dataclass(frozen=True)
class Confirm:
    action: ConfirmAction
    parent: "State"


@dataclass(frozen=True)
class NewCategoryInput:
    pass


@dataclass(frozen=True)
class NewAliasInput:
    """Two-step input: alias name first, then its command."""
    category: str
    alias: Optional[str] = None


@dataclass(frozen=True)
class EditTemplateInput:
    category: str
    alias: str


State = Union[
    CategoryList, AliasList, AliasDetail, PlaceholderPrompt, Confirm,
    NewCategoryInput, NewAliasInput, EditTemplateInput,
]


# -- events -------------------------------------------------------------------

@dataclass(frozen=True)
class Select:
    name: str


@dataclass(frozen=True)
class Add:
    pass


@dataclass(frozen=True)
class Edit:
    pass


@dataclass(frozen=True)
class Run:
    pass


@dataclass(frozen=True)
class Delete:
    name: Optional[str] = None


@dataclass(frozen=True)
class Submit:
    text: str


@dataclass(frozen=True)
class Answer:
    yes: bool


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Event = Union[Select, Add, Edit, Run, Delete, Submit, Answer, Back, Quit]


def parent_of(state: State) -> State:
    """The state a Back event returns to."""
    if isinstance(state, (AliasList, NewCategoryInput)):
        return CategoryList()
    if isinstance(state, NewAliasInput) and state.alias is not None:
        return NewAliasInput(state.category)
    if isinstance(state, (AliasDetail, NewAliasInput)):
        return AliasList(state.category)
    if isinstance(state, (PlaceholderPrompt, EditTemplateInput)):
        return AliasDetail(state.category, state.alias)
    if isinstance(state, Confirm):
        return state.parent
    return state


@dataclass
class TuiController:
    """Owns the current state and performs the side effects of transitions."""
    repository: Repository
    executor: Executor
    state: State = field(default_factory=CategoryList)
    finished: bool = False
    message: Optional[str] = None
    error: Optional[str] = None
    last_outcome: Optional[ExitOutcome] = None

    def __post_init__(self):
        self._transitions: Dict[type, Callable[[State, Event], State]] = {
            CategoryList: self._on_category_list,
            AliasList: self._on_alias_list,
            AliasDetail: self._on_alias_detail,
            PlaceholderPrompt: self._on_placeholder_prompt,
            Confirm: self._on_confirm,
            NewCategoryInput: self._on_new_category,
            NewAliasInput: self._on_new_alias,
            EditTemplateInput: self._on_edit_template,
        }

    def handle(self, event: Event) -> State:
        """Apply one event. Errors keep the current state and set ``error``."""
        self.message = None
        self.error = None
        current = self.state

        if isinstance(event, Back) and not isinstance(current, CategoryList):
            self.state = parent_of(current)
            return self.state

        if isinstance(event, Quit) and not isinstance(current, CategoryList):
            self.message = "Go back to the category list to quit"
            return self.state

        try:
            self.state = self._transitions[type(current)](current, event)
        except BshError as e:
            logger.debug("Transition from %s failed: %s", current, e)
            self.error = str(e)
        return self.state

    # -- transitions ---------------------------------------------------------

    def _on_category_list(self, state: CategoryList, event: Event) -> State:
        if isinstance(event, Select):
            self.repository.list_aliases(event.name)
            return AliasList(event.name)
        if isinstance(event, Delete) and event.name:
            self.repository.list_aliases(event.name)
            return Confirm(DeleteCategory(event.name), parent=state)
        if isinstance(event, Add):
            return NewCategoryInput()
        if isinstance(event, Quit):
            self.finished = True
        return state

    def _on_alias_list(self, state: AliasList, event: Event) -> State:
        if isinstance(event, Select):
            self.repository.get(state.category, event.name)
            return AliasDetail(state.category, event.name)
        if isinstance(event, Delete) and event.name:
            self.repository.get(state.category, event.name)
            return Confirm(DeleteAlias(state.category, event.name), parent=state)
        if isinstance(event, Add):
            return NewAliasInput(state.category)
        return state

    def _on_alias_detail(self, state: AliasDetail, event: Event) -> State:
        if isinstance(event, Run):
            return self._start_run(state)
        if isinstance(event, Edit):
            return EditTemplateInput(state.category, state.alias)
        if isinstance(event, Delete):
            return Confirm(DeleteAlias(state.category, state.alias), parent=state)
        return state

    def _start_run(self, state: AliasDetail) -> State:
        raw = self.repository.get(state.category, state.alias)
        pending = tuple(tpl.placeholders(tpl.parse(raw)))
        if pending:
            return PlaceholderPrompt(state.category, state.alias, raw, pending)
        return self._execute(state.category, raw, {})

    def _on_placeholder_prompt(self, state: PlaceholderPrompt, event: Event) -> State:
        if not isinstance(event, Submit):
            return state
        answered = state.answered + ((state.current, event.text),)
        pending = state.pending[1:]
        if pending:
            return replace(state, pending=pending, answered=answered)
        return self._execute(state.category, state.template, dict(answered))

    def _execute(self, category: str, raw: str, answers: Dict[str, str]) -> State:
        command = resolve(tpl.parse(raw), answers.__getitem__)
        outcome = self.executor.execute(command)
        self.last_outcome = outcome
        if outcome.succeeded:
            self.message = f"✓ {command}"
        else:
            self.message = f"{command} exited with status {outcome.exit_code}"
        return AliasList(category)

    def _on_confirm(self, state: Confirm, event: Event) -> State:
        if not isinstance(event, Answer):
            return state
        if not event.yes:
            return state.parent

        action = state.action
        if isinstance(action, DeleteCategory):
            self.repository.remove_category(action.category)
            self.message = f"✓ Category '{action.category}' deleted"
            return CategoryList()
        self.repository.remove_alias(action.category, action.alias)
        self.message = f"✓ Command '{action.alias}' deleted"
        return AliasList(action.category)

    def _on_new_category(self, state: NewCategoryInput, event: Event) -> State:
        if not isinstance(event, Submit):
            return state
        name = event.text.strip()
        self.repository.add_category(name)
        self.message = f"✓ Category '{name}' added"
        return AliasList(name)

    def _on_new_alias(self, state: NewAliasInput, event: Event) -> State:
        if not isinstance(event, Submit):
            return state

        if state.alias is None:
            alias = event.text.strip()
            validate_name("Alias", alias)
            if self.repository.settings.strict_add and \
                    self.repository.has_alias(state.category, alias):
                raise AlreadyExists(
                    f"Command '{alias}' already exists in category '{state.category}'"
                )
            return replace(state, alias=alias)

        validate_template(event.text)
        self.repository.add_or_update_alias(state.category, state.alias, event.text)
        self.message = f"✓ Command '{state.alias}' added"
        return AliasList(state.category)

    def _on_edit_template(self, state: EditTemplateInput, event: Event) -> State:
        if not isinstance(event, Submit):
            return state
        self.repository.add_or_update_alias(state.category, state.alias, event.text)
        self.message = f"✓ Command '{state.alias}' updated"
        return AliasDetail(state.category, state.alias)
