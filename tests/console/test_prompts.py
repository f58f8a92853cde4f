"""Tests for the terminal input collaborator."""

import pytest

from console.prompts import ConsoleInput


def make_input(answers):
    """ConsoleInput fed from a list, capturing what it prints."""
    answers = iter(answers)
    printed = []
    return ConsoleInput(input_fn=lambda prompt: next(answers), output_fn=printed.append), printed


class TestPromptInt:
    """Tests for integer prompts."""

    def test_valid_answer(self):
        inputs, printed = make_input(["25"])
        assert inputs.prompt_int(1, 100, "Bet") == 25
        assert printed == []

    def test_reprompts_until_valid(self):
        inputs, printed = make_input(["abc", "0", "101", " 7 "])
        assert inputs.prompt_int(1, 100) == 7
        assert len(printed) == 3
        assert "between 1 and 100" in printed[0]

    def test_empty_range_raises(self):
        inputs, _ = make_input([])
        with pytest.raises(ValueError):
            inputs.prompt_int(5, 1)


class TestPromptChoice:
    """Tests for choice prompts."""

    def test_case_normalised(self):
        inputs, _ = make_input(["h"])
        assert inputs.prompt_choice(["H", "S"]) == "H"

    def test_reprompts_on_unavailable_choice(self):
        inputs, printed = make_input(["P", "x", "s"])
        assert inputs.prompt_choice(["H", "S"], "Actions") == "S"
        assert printed == ["Invalid or unavailable choice."] * 2

    def test_no_options_raises(self):
        inputs, _ = make_input([])
        with pytest.raises(ValueError):
            inputs.prompt_choice([])


class TestPromptLine:
    def test_strips_whitespace(self):
        inputs, _ = make_input(["  Alice  "])
        assert inputs.prompt_line("Name") == "Alice"
