"""Terminal implementation of the input collaborator."""

from typing import Callable, Iterable


class ConsoleInput:
    """
    Reads validated answers from a terminal.

    Every prompt repeats until the answer is acceptable, so callers only
    ever receive valid values.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ) -> None:
        self._input = input_fn
        self._output = output_fn

    def prompt_int(self, low: int, high: int, message: str = "") -> int:
        """Ask for an integer in [low, high]."""
        if low > high:
            raise ValueError(f"Empty range: {low}..{high}")
        prompt = f"{message}: " if message else f"Enter a number ({low}-{high}): "
        while True:
            raw = self._input(prompt).strip()
            try:
                value = int(raw)
            except ValueError:
                value = None
            if value is not None and low <= value <= high:
                return value
            self._output(f"Invalid entry. Must be between {low} and {high}.")

    def prompt_choice(self, valid: Iterable[str], message: str = "") -> str:
        """Ask for one of the valid options; answers are upper-cased."""
        options = {option.upper() for option in valid}
        if not options:
            raise ValueError("No options to choose from")
        prompt = f"{message}\n > " if message else " > "
        while True:
            choice = self._input(prompt).strip().upper()
            if choice in options:
                return choice
            self._output("Invalid or unavailable choice.")

    def prompt_line(self, message: str = "") -> str:
        """Ask for a line of text."""
        return self._input(f"{message}: " if message else "").strip()
