"""Renders game events and table snapshots as terminal text."""

from typing import Any, Callable

from console.schemas import HandView, PlayerView, TableSnapshot
from core.game.events import EventType, GameEvent

RULE = "=" * 50
THIN_RULE = "-" * 50
STAR_RULE = "*" * 50


def format_cards(cards: list[Any]) -> str:
    """Render a list of cards as '[ A♠ 10♥ ]'."""
    return "[ " + " ".join(str(c) for c in cards) + (" ]" if cards else "]")


def format_hand(index: int, hand: HandView) -> str:
    """One line describing a player hand."""
    tags = ""
    if hand.is_split:
        tags += " (Split)"
    if hand.is_doubled:
        tags += " (DD)"
    return f"  Hand {index + 1}{tags} Bet: ${hand.wager} Score: ({hand.score}): {format_cards(hand.cards)}"


def format_player(player: PlayerView, include_hands: bool = True) -> list[str]:
    lines = [f"**Player {player.id} ({player.name})** - Chips: ${player.chips}"]
    if include_hands:
        lines.extend(format_hand(i, hand) for i, hand in enumerate(player.hands))
    return lines


_OUTCOME_TEXT = {
    "BUST": "Player BUSTS. Bet of ${wager} lost.",
    "NATURAL_PUSH": "PUSH (Natural vs. Natural). Bet of ${wager} returned.",
    "NATURAL_WIN": "NATURAL BLACKJACK! Wins 1.5x. ${net} won (Total return: ${credit}).",
    "DEALER_BUST": "Dealer BUSTS ({dealer_score}). Player wins ${net}.",
    "DEALER_NATURAL": "Dealer has NATURAL BLACKJACK. Bet of ${wager} lost.",
    "WIN": "Player Wins ({player_score} > {dealer_score}). Wins ${net}.",
    "LOSE": "Dealer Wins ({dealer_score} > {player_score}). Bet of ${wager} lost.",
    "PUSH": "PUSH ({player_score} vs. {dealer_score}). Bet of ${wager} returned.",
}


class TextRenderer:
    """Turns engine events into lines of text."""

    def __init__(self, output_fn: Callable[[str], None] = print) -> None:
        self._output = output_fn
        self._formatters: dict[EventType, Callable[[dict[str, Any]], list[str]]] = {
            EventType.ROUND_STARTED: self._round_started,
            EventType.SUPPLY_REBUILT: self._supply_rebuilt,
            EventType.SUPPLY_RECYCLED: lambda d: ["\n--- Reshuffling Discard Pile ---"],
            EventType.WAGER_PLACED: lambda d: [f"{d['player']} bets ${d['amount']}."],
            EventType.CARD_DEALT: self._card_dealt,
            EventType.DEALER_NATURAL: lambda d: ["\n**DEALER NATURAL BLACKJACK!**"],
            EventType.TURN_SKIPPED: lambda d: [
                f"\n{d['player']}: Dealer has a Natural. Skip action phase."
            ],
            EventType.HAND_FOCUSED: self._hand_focused,
            EventType.HAND_SKIPPED: lambda d: [
                f"{d['player']}'s hand {d['hand_index'] + 1} is done ({d['state'].title()})."
            ],
            EventType.PLAYER_HIT: lambda d: [f"Player hits. Score now ({d['score']})."],
            EventType.PLAYER_STAND: lambda d: [f"Player stands on {d['score']}."],
            EventType.PLAYER_DOUBLE: self._player_double,
            EventType.PLAYER_SPLIT: self._player_split,
            EventType.SPLIT_ACES_STAND: lambda d: [
                "Split Aces: Only one card is dealt to each. Must stand."
            ],
            EventType.HAND_TWENTY_ONE: lambda d: ["Hand is 21! Standing."],
            EventType.HAND_BUSTED: lambda d: [f"Hand Busted! ({d['score']})"],
            EventType.DEALER_REVEALS: self._dealer_reveals,
            EventType.DEALER_HITS: lambda d: [f"Dealer Hits. Score now ({d['score']})."],
            EventType.DEALER_STANDS: self._dealer_stands,
            EventType.HAND_SETTLED: self._hand_settled,
            EventType.PLAYER_ELIMINATED: lambda d: [
                f"\n{d['player']} is out of chips and leaves the game."
            ],
            EventType.INVALID_ACTION: lambda d: [d["message"]],
            EventType.INSUFFICIENT_FUNDS: lambda d: [
                f"Not enough chips: need ${d['required']}, have ${d['available']}."
            ],
            EventType.SUPPLY_EXHAUSTED: lambda d: ["No cards left to deal or shuffle!"],
        }
        self._settlement_header_shown = False

    def __call__(self, event: GameEvent) -> None:
        self.handle(event)

    def handle(self, event: GameEvent) -> None:
        """Print the text for an event, if it has any."""
        formatter = self._formatters.get(event.event_type)
        if formatter is None:
            return
        for line in formatter(event.data):
            self._output(line)

    def render_summary(self, snapshot: TableSnapshot) -> None:
        """Chip counts after a round."""
        self._output(f"\n{STAR_RULE}")
        self._output("Round Summary:")
        for player in snapshot.players:
            self._output("")
            for line in format_player(player, include_hands=False):
                self._output(line)
        self._output(f"\n{STAR_RULE}")

    def render_table(self, snapshot: TableSnapshot) -> None:
        """Every player's live hands."""
        for player in snapshot.players:
            self._output("")
            for line in format_player(player):
                self._output(line)

    def render_final(self, snapshot: TableSnapshot) -> None:
        self._output("\nThank you for playing Blackjack. Final Chip Counts:")
        for player in snapshot.players:
            for line in format_player(player, include_hands=False):
                self._output(line)
        self._output("Goodbye!")

    # Event formatters

    def _round_started(self, data: dict[str, Any]) -> list[str]:
        self._settlement_header_shown = False
        return [
            f"\n{RULE}",
            f"{'NEW ROUND STARTING':^50}",
            f"{'Round ' + str(data['round']):^50}",
            RULE,
        ]

    def _supply_rebuilt(self, data: dict[str, Any]) -> list[str]:
        return [
            f"Deck size ({data['undealt_before']}) is low. "
            f"Performing full reshuffle of {data['total']} cards."
        ]

    def _card_dealt(self, data: dict[str, Any]) -> list[str]:
        if data["dealer"]:
            if data["score"] is None:
                return ["Dealer's hole card: XX"]
            return [f"Dealer's upcard: {data['card']}"]
        return [f"{data['recipient']} receives {data['card']} ({data['score']})"]

    def _hand_focused(self, data: dict[str, Any]) -> list[str]:
        return [
            f"\n--- {data['player']}'s Turn (Hand {data['hand_index'] + 1}, "
            f"Bet: ${data['wager']}) ---",
            f"Current Hand Score ({data['score']}): {format_cards(data['cards'])}",
        ]

    def _player_double(self, data: dict[str, Any]) -> list[str]:
        lines = [
            f"Player Doubles Down! Bet is now ${data['wager']}.",
            f"Drew {data['card']}. Final Hand Score: ({data['score']})",
        ]
        if data["busted"]:
            lines.append("Hand Busted!")
        return lines

    def _player_split(self, data: dict[str, Any]) -> list[str]:
        first, second = data["hands"]
        return [
            f"Splitting Hand. Placing additional ${data['wager']} bet.",
            f"Hands: {format_cards(first)} and {format_cards(second)}",
            "Split successful. Playing the first hand...",
        ]

    def _dealer_reveals(self, data: dict[str, Any]) -> list[str]:
        return [
            f"\n{THIN_RULE}",
            "DEALER'S PLAY".center(50),
            THIN_RULE,
            f"Dealer reveals hole card. Full Hand ({data['score']}): {format_cards(data['cards'])}",
        ]

    def _dealer_stands(self, data: dict[str, Any]) -> list[str]:
        if data["busted"]:
            return [f"Dealer BUSTS at {data['score']}."]
        return [f"Dealer Stands at {data['score']}."]

    def _hand_settled(self, data: dict[str, Any]) -> list[str]:
        lines = []
        if not self._settlement_header_shown:
            self._settlement_header_shown = True
            lines += [f"\n{THIN_RULE}", f"{'FINAL SETTLEMENT':^50}", THIN_RULE]
        lines.append(
            f"\n--- Settlement for {data['player']}'s hand (Score: {data['player_score']}) ---"
        )
        lines.append(_OUTCOME_TEXT[data["outcome"]].format(**data))
        return lines
