"""Terminal blackjack session: seating, the play-again loop and final standings."""

from random import Random
from typing import Callable

from config import TableConfig, config
from console.prompts import ConsoleInput
from console.renderer import TextRenderer
from console.schemas import TableSnapshot
from core.errors import SupplyExhausted
from core.game.engine import RoundEngine
from logging_utils import get_logger, setup_logging

logger = get_logger(__name__)


def seat_from_prompts(engine: RoundEngine, inputs: ConsoleInput) -> None:
    """Ask how many players sit down and what they are called."""
    table = engine.table
    count = inputs.prompt_int(
        table.min_players,
        table.max_players,
        f"Enter number of players ({table.min_players}-{table.max_players})",
    )
    names = [inputs.prompt_line(f"Enter name for Player {i}") for i in range(1, count + 1)]
    engine.seat_players(names)


def run_session(
    inputs: ConsoleInput,
    output_fn: Callable[[str], None] = print,
    table: TableConfig | None = None,
    rng: Random | None = None,
) -> RoundEngine:
    """
    Play rounds until everyone is broke or the table declines another round.

    Returns:
        The engine, in its final state
    """
    engine = RoundEngine(table=table, rng=rng)
    renderer = TextRenderer(output_fn)
    engine.subscribe(renderer)

    output_fn("### Welcome to Blackjack Casino ###")
    seat_from_prompts(engine, inputs)

    reason = "players quit"
    while True:
        engine.remove_broke_players()
        if not engine.players:
            output_fn("\nAll players are out of chips. Game Over.")
            reason = "bankrupt"
            break

        try:
            engine.play_round(inputs)
        except SupplyExhausted as exc:
            logger.error("Session aborted: %s", exc)
            output_fn(f"CRITICAL GAME ERROR: {exc}")
            reason = "supply exhausted"
            break

        renderer.render_summary(TableSnapshot.from_engine(engine))
        if inputs.prompt_choice(["Y", "N"], "Play another round? (Y/N)") != "Y":
            break

    engine.close(reason)
    renderer.render_final(TableSnapshot.from_engine(engine))
    return engine


def main() -> None:
    """Console entry point."""
    setup_logging("DEBUG" if config.debug else config.log_level)
    try:
        run_session(ConsoleInput())
    except (KeyboardInterrupt, EOFError):
        print("\nGoodbye!")


if __name__ == "__main__":
    main()
