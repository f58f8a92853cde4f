"""Input collaborator contract the round engine depends on."""

from typing import Iterable, Protocol


class InputCollaborator(Protocol):
    """
    Source of validated decisions.

    Implementations keep asking until the answer is valid, so the engine
    never sees malformed input.
    """

    def prompt_int(self, low: int, high: int, message: str = "") -> int:
        """Return an integer in the inclusive range [low, high]."""
        ...

    def prompt_choice(self, valid: Iterable[str], message: str = "") -> str:
        """Return one of `valid`, upper-cased."""
        ...

    def prompt_line(self, message: str = "") -> str:
        """Return a line of free text."""
        ...
