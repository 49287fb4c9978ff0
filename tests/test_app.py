"""
Tests for the interactive session
=================================
"""

import io
import json

import pytest
from rich.console import Console

import app
from machine.turing_machine import MachineBuilder


def run(console, scripted, lines, tmp_path, name="tm.json"):
    out = tmp_path / name
    path = app.run_session(console=console, stream=scripted(lines + [str(out)]))
    assert path == str(out)
    return out


class TestRunSession:
    def test_full_session_writes_machine(self, console, scripted, tmp_path):
        lines = ["3", "0", "1", "2", "a", "add", "0", "1", "a", "a", "Right", "finish"]
        out = run(console, scripted, lines, tmp_path)

        doc = json.loads(out.read_text(encoding="utf-8"))
        assert (doc["start"], doc["accept"], doc["reject"]) == ("0", "1", "2")
        assert doc["delta"] == [{"from": "0", "to": [{"result": ["1", "a", "R"], "on": "a"}]}]
        assert f"Successfully wrote Turing Machine to {out}." in console.file.getvalue()

    def test_reprompts_on_invalid_input(self, console, scripted, tmp_path):
        lines = [
            "x", "1", "3",          # states
            "0", "1",               # start, accept
            "1", "2",               # reject: accept is not a candidate
            "", "a b", "a_b", "ab", # alphabet
            "finish",
            "",                     # empty output path
        ]
        out = run(console, scripted, lines, tmp_path)

        text = console.file.getvalue()
        assert "Input must be >=2." in text
        assert "Input should contain no spaces." in text
        assert "Input should contain no underscores." in text
        assert "Input should be nonempty." in text
        assert "Expecting nonempty string." in text
        assert json.loads(out.read_text(encoding="utf-8"))["delta"] == []

    def test_remove_flow(self, console, scripted, tmp_path):
        lines = [
            "2", "0", "0", "1", "01",
            "add", "0", "1", "0", "1", "Left",
            "add", "0", "0", "1", "_", "Right",
            "remove", "0", "0",
            "finish",
        ]
        out = run(console, scripted, lines, tmp_path)

        doc = json.loads(out.read_text(encoding="utf-8"))
        assert doc["delta"] == [{"from": "0", "to": [{"result": ["0", "_", "R"], "on": "1"}]}]

    def test_duplicate_is_reported_and_ignored(self, console, scripted, tmp_path):
        lines = [
            "2", "0", "1", "0", "a",
            "add", "0", "1", "a", "a", "Right",
            "add", "0", "0", "a", "_", "Left",
            "finish",
        ]
        out = run(console, scripted, lines, tmp_path)

        assert "Duplicate transition from state 0 on input a." in console.file.getvalue()
        doc = json.loads(out.read_text(encoding="utf-8"))
        assert doc["delta"][0]["to"] == [{"result": ["1", "a", "R"], "on": "a"}]

    def test_remove_not_offered_on_empty_table(self, console, scripted, tmp_path):
        lines = ["2", "0", "1", "0", "a", "remove", "finish"]
        run(console, scripted, lines, tmp_path)

        text = console.file.getvalue()
        assert "[remove] Remove a transition." not in text
        assert "[add] Add a transition." in text

    def test_second_run_appends(self, console, scripted, tmp_path):
        lines = ["2", "0", "1", "0", "a", "finish"]
        out = run(console, scripted, lines, tmp_path)
        first = out.read_text(encoding="utf-8")
        run(console, scripted, lines, tmp_path)
        assert out.read_text(encoding="utf-8") == first + first

    def test_closed_input_aborts_without_output(self, console, scripted, tmp_path):
        with pytest.raises(EOFError):
            app.run_session(console=console, stream=scripted(["3", "0", "1", "2", "a", "add"]))
        assert list(tmp_path.iterdir()) == []


class TestFreeTextPrompts:
    @pytest.mark.parametrize("raw", [" ab", "ab ", " "])
    def test_alphabet_with_edge_space_is_rejected(self, console, scripted, raw):
        b = MachineBuilder()
        assert app.prompt_alphabet(b, console, scripted([raw, "zz"])) == ["z", "z"]

        text = console.file.getvalue()
        assert "Input should contain no spaces." in text
        assert "Input should be nonempty." not in text

    def test_empty_alphabet_still_reported(self, console, scripted):
        app.prompt_alphabet(MachineBuilder(), console, scripted(["", "a"]))
        assert "Input should be nonempty." in console.file.getvalue()

    def test_output_path_kept_verbatim(self, console, scripted):
        assert app.prompt_output(console, scripted([" tm.json "])) == " tm.json "

    def test_success_line_not_wrapped(self, scripted, tmp_path):
        narrow = Console(file=io.StringIO(), width=20, color_system=None)
        out = tmp_path / ("machine_" * 8 + ".json")
        app.run_session(console=narrow, stream=scripted(["2", "0", "1", "0", "a", "finish", str(out)]))

        expected = f"Successfully wrote Turing Machine to {out}."
        assert any(line.endswith(expected) for line in narrow.file.getvalue().splitlines())


class TestPromptHelpers:
    def test_menu_options(self):
        b = MachineBuilder()
        b.initialize(2)
        b.set_alphabet("a")
        assert app.menu_options(b) == ["add", "finish"]
        b.add_transition("0", "1", "a", "a", "R")
        assert app.menu_options(b) == ["add", "remove", "finish"]

    def test_state_prompt_annotates_roles(self, console, scripted):
        b = MachineBuilder()
        b.initialize(3)
        b.set_accept("1")
        b.set_reject("2")
        assert app._state_prompt(b, "From which state?", console, scripted(["2"])) == "2"
        assert "(0, 1 (accept), 2 (reject))" in console.file.getvalue()

    def test_show_transitions(self, console):
        b = MachineBuilder()
        b.initialize(2)
        b.set_alphabet("a")
        b.add_transition("0", "1", "a", "_", "Left")
        app.show_transitions(b, console)
        assert "∂(0, a) = (1, _, L)" in console.file.getvalue()


class TestMain:
    @pytest.mark.parametrize("error", [EOFError, KeyboardInterrupt])
    def test_input_failure_exits(self, monkeypatch, error):
        def fail():
            raise error()

        monkeypatch.setattr(app, "run_session", fail)
        with pytest.raises(SystemExit) as exc:
            app.main([])
        assert exc.value.code == 1

    def test_write_failure_exits(self, monkeypatch):
        def fail():
            raise app.MachineWriteError("Error writing the Turing Machine to the file.")

        monkeypatch.setattr(app, "run_session", fail)
        with pytest.raises(SystemExit) as exc:
            app.main([])
        assert exc.value.code == 1
