"""Tests for the inquirer/rich rendering layer, with scripted answers."""

import builtins

import pytest

from bsh import app as app_module
from bsh.app import TuiApp, literal
from bsh.tui import (
    AliasDetail, AliasList, Answer, Back, Confirm, DeleteAlias, Delete,
    EditTemplateInput, PlaceholderPrompt, Quit, Submit, TuiController,
)


class ScriptedInquirer:
    """Replaces inquirer.prompt, answering questions from a list."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.questions = []

    def __call__(self, questions, theme=None):
        self.questions.append(questions[0])
        return self.answers.pop(0)


@pytest.fixture
def scripted(monkeypatch):
    def install(*answers):
        fake = ScriptedInquirer(answers)
        monkeypatch.setattr(app_module.inquirer, "prompt", fake)
        return fake
    monkeypatch.setattr(TuiApp, "clear_screen", lambda self: None)
    monkeypatch.setattr(builtins, "input", lambda *args: "")
    return install


@pytest.fixture
def tui(repo, executor, console):
    controller = TuiController(repository=repo, executor=executor)
    return TuiApp(controller, console=console)


class TestSession:
    def test_add_and_run_command(self, tui, scripted, repo, executor):
        scripted(
            {"choice": ":add"},
            {"value": "net"},
            {"choice": ":add"},
            {"value": "scan"},
            {"value": "nmap -p <[port]> <[host]>"},
            {"choice": "scan"},
            {"choice": ":run"},
            {"value": "22"},
            {"value": "localhost"},
            {"choice": ":back"},
            {"choice": ":quit"},
        )
        tui.run()

        assert tui.controller.finished
        assert repo.get("net", "scan") == "nmap -p <[port]> <[host]>"
        assert executor.commands == ["nmap -p 22 localhost"]

    def test_cancelled_menu_quits_from_category_list(self, tui, scripted):
        scripted(None)
        tui.run()
        assert tui.controller.finished

    def test_delete_category_with_confirmation(self, tui, scripted, repo):
        repo.add_or_update_alias("tools", "ll", "ls -la")
        scripted(
            {"choice": ":delete"},
            {"choice": "tools"},
            {"confirm": True},
            {"choice": ":quit"},
        )
        tui.run()
        assert repo.list_categories() == []

    def test_header_and_detail_render(self, tui, scripted, repo, console):
        repo.add_or_update_alias("net", "scan", "nmap <[host]>")
        tui.controller.state = AliasDetail("net", "scan")
        scripted({"choice": ":back"})
        assert tui.read_event() == Back()
        output = console.file.getvalue()
        assert "Placeholders:" in output
        assert "host" in output


class TestReadEvent:
    def test_placeholder_prompt(self, tui, scripted):
        tui.controller.state = PlaceholderPrompt("c", "a", "<[x]> <[y]>", ("y",), (("x", "1"),))
        fake = scripted({"value": "2"})
        assert tui.read_event() == Submit("2")
        assert "<[y]>" in fake.questions[0].message
        assert "(2/2)" in fake.questions[0].message

    def test_cancelled_text_input_goes_back(self, tui, scripted):
        tui.controller.state = PlaceholderPrompt("c", "a", "<[x]>", ("x",))
        scripted(None)
        assert tui.read_event() == Back()

    def test_confirm_answer(self, tui, scripted, repo):
        repo.add_or_update_alias("tools", "ll", "ls -la")
        tui.controller.state = Confirm(DeleteAlias("tools", "ll"), parent=AliasList("tools"))
        scripted({"confirm": False})
        assert tui.read_event() == Answer(False)

    def test_pick_delete_target(self, tui, scripted, repo):
        repo.add_or_update_alias("tools", "ll", "ls -la")
        tui.controller.state = AliasList("tools")
        scripted({"choice": ":delete"}, {"choice": "ll"})
        assert tui.read_event() == Delete("ll")

    def test_nothing_to_delete(self, tui, scripted):
        scripted({"choice": ":delete"})
        assert tui.read_event() is None
        assert tui.controller.message == "Nothing to delete"

    def test_quit_choice(self, tui, scripted):
        scripted({"choice": ":quit"})
        assert tui.read_event() == Quit()

    def test_edit_prefills_current_command(self, tui, scripted, repo):
        repo.add_or_update_alias("tools", "cols", "awk '{print $1}' <[file]>")
        tui.controller.state = EditTemplateInput("tools", "cols")
        fake = scripted({"value": "cut -f1 <[file]>"})
        assert tui.read_event() == Submit("cut -f1 <[file]>")
        assert fake.questions[0].default == "awk '{print $1}' <[file]>"


def test_literal_escapes_braces():
    assert literal("awk '{print $1}'").format() == "awk '{print $1}'"
