"""Blackjack round engine with state machine."""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Callable, Iterable

from transitions import Machine, MachineError

from config import TableConfig, config
from core.cards import Card, Supply
from core.errors import InsufficientFunds, InvalidAction, SupplyExhausted
from core.game.collaborators import InputCollaborator
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.settlement import Settlement, settle_hand
from core.game.state import RoundPhase
from core.hand import BLACKJACK, Hand, HandState
from core.participant import Dealer, Player
from logging_utils import get_logger

logger = get_logger(__name__)


class Action(Enum):
    """Decisions a player can take on an active hand, keyed by their input letter."""

    HIT = "H"
    STAND = "S"
    SPLIT = "P"
    DOUBLE = "D"

    @property
    def label(self) -> str:
        return {
            Action.HIT: "(H)it",
            Action.STAND: "(S)tand",
            Action.SPLIT: "S(P)lit",
            Action.DOUBLE: "(D)ouble Down",
        }[self]


@dataclass(frozen=True)
class HandResult:
    """Settlement of one player hand."""

    player: Player
    hand_index: int
    cards: tuple[Card, ...]
    settlement: Settlement


class RoundEngine:
    """
    Runs rounds of multi-player blackjack against a dealer.

    The engine owns the supply, the seated players, the dealer and the turn
    queue. Decisions are pulled from an input collaborator; everything that
    happens is pushed out as events.
    """

    # State machine states
    STATES = [p.name.lower() for p in RoundPhase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "open_betting", "source": "idle", "dest": "betting"},
        {"trigger": "start_deal", "source": "betting", "dest": "dealing"},
        {"trigger": "begin_turns", "source": "dealing", "dest": "player_turns"},
        {"trigger": "begin_dealer_turn", "source": "player_turns", "dest": "dealer_turn"},
        {"trigger": "begin_settlement", "source": "dealer_turn", "dest": "settling"},
        {"trigger": "finish_round", "source": "settling", "dest": "idle"},
        {"trigger": "end_game", "source": "*", "dest": "game_over"},
    ]

    def __init__(
        self,
        table: TableConfig | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a new table.

        Args:
            table: Table settings (uses the global configuration if not provided)
            rng: Random number generator for reproducible shuffles
        """
        self.table = table or config.table
        self.supply = Supply(
            num_sets=self.table.num_decks,
            reshuffle_threshold=self.table.reshuffle_threshold,
            rng=rng,
        )
        self.supply.shuffle()

        self.dealer = Dealer()
        self.players: list[Player] = []
        self.turn_queue: deque[Player] = deque()
        self.events = EventEmitter()
        self._round_number = 0
        self._opening_balances: dict[int, int] = {}

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="idle",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def phase(self) -> RoundPhase:
        """Get current round phase as enum."""
        return RoundPhase[self._machine_state.upper()]  # type: ignore

    @property
    def round_number(self) -> int:
        """Return the number of rounds started."""
        return self._round_number

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    # Seating

    def seat_players(self, names: Iterable[str]) -> list[Player]:
        """
        Seat a fresh set of players with the starting balance.

        Blank names default to "Player N".

        Raises:
            ValueError: If the number of players is outside the table limits
        """
        names = list(names)
        if not self.table.min_players <= len(names) <= self.table.max_players:
            raise ValueError(
                f"Table seats {self.table.min_players}-{self.table.max_players} players, "
                f"got {len(names)}"
            )

        self.players = [
            Player(id=i, name=name.strip() or f"Player {i}", chips=self.table.starting_chips)
            for i, name in enumerate(names, start=1)
        ]
        self.events.emit_new(
            EventType.PLAYERS_SEATED,
            players=[p.name for p in self.players],
            chips=self.table.starting_chips,
        )
        return self.players

    def remove_broke_players(self) -> list[Player]:
        """Unseat every player who cannot cover a bet; return them."""
        broke = [p for p in self.players if not p.can_afford(self.table.min_bet)]
        self.players = [p for p in self.players if p.can_afford(self.table.min_bet)]
        for player in broke:
            logger.info("%s is out of chips", player)
            self.events.emit_new(EventType.PLAYER_ELIMINATED, player=player.name)
        return broke

    def standings(self) -> list[Player]:
        """Return seated players ordered by chip balance, richest first."""
        return sorted(self.players, key=lambda p: p.chips, reverse=True)

    def close(self, reason: str) -> None:
        """End the session."""
        if self.phase != RoundPhase.GAME_OVER:
            self.end_game()
        self.events.emit_new(
            EventType.GAME_ENDED,
            reason=reason,
            balances={p.name: p.chips for p in self.standings()},
        )

    # Round orchestration

    def play_round(self, inputs: InputCollaborator) -> list[HandResult]:
        """
        Play one full round: wagers, deal, player turns, dealer, settlement.

        Raises:
            SupplyExhausted: If the supply runs dry; the engine is then game over
        """
        self.begin_round()
        for player in self.players:
            amount = inputs.prompt_int(
                self.table.min_bet,
                player.chips,
                f"{player.name} (Chips: ${player.chips}), place your bet",
            )
            self.place_wager(player, amount)

        self.deal_initial()
        self.run_player_turns(inputs)
        self.play_dealer()
        return self.settle()

    def begin_round(self) -> None:
        """Open betting, rebuilding the supply first if it has run low."""
        self._require_phase(RoundPhase.IDLE)
        if not self.players:
            raise InvalidAction("No players seated")
        if any(not p.can_afford(self.table.min_bet) for p in self.players):
            raise InvalidAction("Broke players must leave before the next round")

        self.events.clear_history()

        if self.supply.needs_rebuild:
            undealt = self.supply.undealt_count
            self.supply.rebuild()
            self.events.emit_new(
                EventType.SUPPLY_REBUILT,
                undealt_before=undealt,
                total=self.supply.total_cards,
            )

        self._advance("open_betting")
        self._round_number += 1
        self.turn_queue.clear()
        self._opening_balances = {p.id: p.chips for p in self.players}
        logger.info("Round %d started with %d players", self._round_number, len(self.players))
        self.events.emit_new(
            EventType.ROUND_STARTED,
            round=self._round_number,
            undealt=self.supply.undealt_count,
        )

    def place_wager(self, player: Player, amount: int) -> Hand:
        """
        Stake a player's wager and queue them for the decision phase.

        Raises:
            InvalidAction: If betting is closed, the amount is below the
                minimum or the player already has a wager this round
            InsufficientFunds: If the balance does not cover the amount
        """
        self._require_phase(RoundPhase.BETTING)
        if player not in self.players:
            raise InvalidAction(f"{player} is not seated")
        if player.hands:
            raise InvalidAction(f"{player} has already placed a wager")
        if amount < self.table.min_bet:
            raise InvalidAction(f"Bet must be at least {self.table.min_bet}")

        hand = player.open_hand(amount)
        self.turn_queue.append(player)
        self.events.emit_new(
            EventType.WAGER_PLACED,
            player=player.name,
            amount=amount,
            chips=player.chips,
        )
        return hand

    def deal_initial(self) -> None:
        """Deal two cards to each queued player and the dealer, one at a time."""
        if not self.turn_queue:
            raise InvalidAction("No wagers placed")
        self._advance("start_deal")

        for hole in (False, True):
            for player in self.turn_queue:
                self._deal_card(player.hands[0], player)
            self._deal_card(self.dealer.hand, self.dealer, hidden=hole)

        if self.dealer.hand.is_natural:
            logger.info("Dealer natural in round %d", self._round_number)
            self.events.emit_new(EventType.DEALER_NATURAL, upcard=str(self.dealer.upcard))

        self._advance("begin_turns")

    def run_player_turns(self, inputs: InputCollaborator) -> None:
        """Give each queued player their turn, in queue order."""
        self._require_phase(RoundPhase.PLAYER_TURNS)
        dealer_natural = self.dealer.hand.is_natural

        while self.turn_queue:
            player = self.turn_queue.popleft()
            if dealer_natural:
                self.events.emit_new(
                    EventType.TURN_SKIPPED,
                    player=player.name,
                    reason="dealer natural",
                )
                continue
            self.play_hands(player, inputs)

        self._advance("begin_dealer_turn")

    def play_hands(self, player: Player, inputs: InputCollaborator) -> None:
        """
        Play every hand the player holds, left to right.

        The cursor is an index into the player's hand list, so a split
        inserting a hand right after the current one is picked up in order.
        """
        self._require_phase(RoundPhase.PLAYER_TURNS)
        self.events.emit_new(EventType.TURN_STARTED, player=player.name)

        index = 0
        while index < len(player.hands):
            hand = player.hands[index]
            if hand.state.is_terminal:
                self.events.emit_new(
                    EventType.HAND_SKIPPED,
                    player=player.name,
                    hand_index=index,
                    state=hand.state.name,
                )
            else:
                self._play_hand(player, hand, inputs)
            index += 1

    def _play_hand(self, player: Player, hand: Hand, inputs: InputCollaborator) -> None:
        """Prompt for decisions on one hand until it reaches a terminal state."""
        self.events.emit_new(
            EventType.HAND_FOCUSED,
            player=player.name,
            hand_index=player.hands.index(hand),
            wager=hand.wager,
            cards=[str(c) for c in hand.cards],
            score=hand.score,
        )

        while hand.state == HandState.ACTIVE:
            if self._resolve_forced(player, hand):
                break

            actions = self.available_actions(player, hand)
            prompt = "Actions: " + " / ".join(a.label for a in actions)
            choice = inputs.prompt_choice([a.value for a in actions], prompt)
            try:
                self.apply_action(player, hand, Action(choice))
            except InsufficientFunds as exc:
                self.events.emit_new(
                    EventType.INSUFFICIENT_FUNDS,
                    player=player.name,
                    required=exc.required,
                    available=exc.available,
                )
            except InvalidAction as exc:
                self.events.emit_new(
                    EventType.INVALID_ACTION,
                    player=player.name,
                    message=str(exc),
                )

    def _resolve_forced(self, player: Player, hand: Hand) -> bool:
        """Bust or stand the hand automatically if its score leaves no choice."""
        score = hand.score
        if score > BLACKJACK:
            hand.transition(HandState.BUSTED)
            self.events.emit_new(
                EventType.HAND_BUSTED,
                player=player.name,
                hand_index=player.hands.index(hand),
                score=score,
            )
            return True
        if score == BLACKJACK:
            hand.transition(HandState.STANDING)
            self.events.emit_new(
                EventType.HAND_TWENTY_ONE,
                player=player.name,
                hand_index=player.hands.index(hand),
            )
            return True
        return False

    # Player actions

    def available_actions(self, player: Player, hand: Hand) -> list[Action]:
        """Return the actions eligible for a hand right now."""
        if hand.state != HandState.ACTIVE:
            return []
        actions = [Action.HIT, Action.STAND]
        if self.can_split(player, hand):
            actions.append(Action.SPLIT)
        if self.can_double(player, hand):
            actions.append(Action.DOUBLE)
        return actions

    def apply_action(self, player: Player, hand: Hand, action: Action) -> None:
        """Dispatch an action to its handler."""
        handlers = {
            Action.HIT: self.hit,
            Action.STAND: self.stand,
            Action.SPLIT: self.split,
            Action.DOUBLE: self.double_down,
        }
        handlers[action](player, hand)

    def can_split(self, player: Player, hand: Hand) -> bool:
        """Check if splitting is allowed."""
        return (
            hand.state == HandState.ACTIVE
            and hand.is_pair
            and not hand.derived_from_split
            and player.can_afford(hand.wager)
        )

    def can_double(self, player: Player, hand: Hand) -> bool:
        """Check if doubling is allowed."""
        return (
            hand.state == HandState.ACTIVE
            and len(hand.cards) == 2
            and player.can_afford(hand.wager)
        )

    def hit(self, player: Player, hand: Hand) -> Card:
        """Player takes another card."""
        self._require_active(player, hand)
        card = self._deal_card(hand, player)
        self.events.emit_new(
            EventType.PLAYER_HIT,
            player=player.name,
            hand_index=player.hands.index(hand),
            score=hand.score,
        )
        return card

    def stand(self, player: Player, hand: Hand) -> None:
        """Player keeps the hand."""
        self._require_active(player, hand)
        hand.transition(HandState.STANDING)
        self.events.emit_new(
            EventType.PLAYER_STAND,
            player=player.name,
            hand_index=player.hands.index(hand),
            score=hand.score,
        )

    def double_down(self, player: Player, hand: Hand) -> Card:
        """Player doubles the wager and takes exactly one more card."""
        self._require_active(player, hand)
        if len(hand.cards) != 2:
            raise InvalidAction("Double Down only allowed on initial two cards")

        extra = hand.wager
        player.debit(extra)
        hand.wager += extra
        hand.wager_doubled = True
        logger.debug("%s doubles to %d", player, hand.wager)

        card = self._deal_card(hand, player)
        hand.transition(HandState.DOUBLED_COMPLETE)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            player=player.name,
            hand_index=player.hands.index(hand),
            wager=hand.wager,
            card=str(card),
            score=hand.score,
            busted=hand.is_busted,
        )
        return card

    def split(self, player: Player, hand: Hand) -> Hand:
        """
        Player splits a pair into two hands, each backed by the same wager.

        Play continues on the original hand, which can be split again if it
        draws a matching rank. Only the new hand, inserted right after it, is
        marked as a split hand. Split aces get one card each and stand.
        """
        self._require_active(player, hand)
        if not hand.is_pair:
            raise InvalidAction("Cannot split this hand")
        if hand.derived_from_split:
            raise InvalidAction("A hand created by a split cannot be split again")

        player.debit(hand.wager)
        split_aces = hand.is_ace_pair
        hand.transition(HandState.SPLIT_PENDING)

        new_hand = Hand(wager=hand.wager, derived_from_split=True)
        new_hand.add_card(hand.cards.pop(1))
        new_index = player.insert_hand_after(hand, new_hand)
        logger.debug("%s splits into hands %d and %d", player, new_index - 1, new_index)

        self._deal_card(hand, player)
        self._deal_card(new_hand, player)

        if split_aces:
            hand.transition(HandState.STANDING)
            new_hand.transition(HandState.STANDING)
        else:
            hand.transition(HandState.ACTIVE)

        self.events.emit_new(
            EventType.PLAYER_SPLIT,
            player=player.name,
            wager=new_hand.wager,
            hands=[[str(c) for c in h.cards] for h in (hand, new_hand)],
            chips=player.chips,
        )
        if split_aces:
            self.events.emit_new(EventType.SPLIT_ACES_STAND, player=player.name)
        return new_hand

    # Dealer and settlement

    def play_dealer(self) -> None:
        """Reveal the hole card and draw while below the stand total."""
        self._require_phase(RoundPhase.DEALER_TURN)
        hand = self.dealer.hand
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            cards=[str(c) for c in hand.cards],
            score=hand.score,
        )

        if not hand.is_natural:
            while hand.score < self.table.dealer_stand_total:
                self._deal_card(hand, self.dealer)
                self.events.emit_new(EventType.DEALER_HITS, score=hand.score)

        self.events.emit_new(
            EventType.DEALER_STANDS,
            score=hand.score,
            busted=hand.is_busted,
        )
        self._advance("begin_settlement")

    def settle(self) -> list[HandResult]:
        """Pay out every wagered hand, then return all cards to the discard pile."""
        self._require_phase(RoundPhase.SETTLING)
        dealer_hand = self.dealer.hand
        results: list[HandResult] = []

        for player in self.players:
            for index, hand in enumerate(player.hands):
                if hand.wager > 0:
                    settlement = settle_hand(hand, dealer_hand)
                    player.credit(settlement.credit)
                    results.append(
                        HandResult(player, index, tuple(hand.cards), settlement)
                    )
                    logger.debug(
                        "%s hand %d: %s (%+d)",
                        player, index, settlement.outcome.name, settlement.net,
                    )
                    self.events.emit_new(
                        EventType.HAND_SETTLED,
                        player=player.name,
                        hand_index=index,
                        cards=[str(c) for c in hand.cards],
                        outcome=settlement.outcome.name,
                        category=settlement.outcome.category,
                        wager=settlement.wager,
                        credit=settlement.credit,
                        net=settlement.net,
                        player_score=settlement.player_score,
                        dealer_score=settlement.dealer_score,
                    )
                self.supply.discard_hand(hand)
            player.prune_hands()

        self.supply.discard_hand(dealer_hand)
        dealer_hand.reset()

        self.events.emit_new(
            EventType.BALANCES,
            balances={p.name: p.chips for p in self.players},
            deltas={
                p.name: p.chips - self._opening_balances.get(p.id, p.chips)
                for p in self.players
            },
        )
        self.events.emit_new(EventType.ROUND_ENDED, round=self._round_number)
        logger.info("Round %d settled (%d hands)", self._round_number, len(results))

        self._advance("finish_round")
        return results

    # Helpers

    def _deal_card(
        self,
        hand: Hand,
        owner: Player | Dealer,
        hidden: bool = False,
    ) -> Card:
        """Draw a card into a hand; a dry supply ends the game."""
        recycles = self.supply.recycle_count
        try:
            card = self.supply.draw()
        except SupplyExhausted:
            self.events.emit_new(EventType.SUPPLY_EXHAUSTED, round=self._round_number)
            self.end_game()
            raise
        if self.supply.recycle_count != recycles:
            self.events.emit_new(
                EventType.SUPPLY_RECYCLED,
                undealt=self.supply.undealt_count + 1,
            )

        hand.add_card(card)
        is_dealer = owner is self.dealer
        self.events.emit_new(
            EventType.CARD_DEALT,
            recipient=owner.name,
            dealer=is_dealer,
            hand_index=0 if is_dealer else owner.hands.index(hand),
            card="??" if hidden else str(card),
            score=None if hidden else hand.score,
        )
        return card

    def _advance(self, trigger: str) -> None:
        """Fire a state machine trigger, reporting misuse as an invalid action."""
        try:
            getattr(self, trigger)()
        except MachineError as exc:
            raise InvalidAction(f"Cannot {trigger.replace('_', ' ')} during {self.phase}") from exc

    def _require_phase(self, phase: RoundPhase) -> None:
        if self.phase != phase:
            raise InvalidAction(f"Not allowed during {self.phase}")

    def _require_active(self, player: Player, hand: Hand) -> None:
        self._require_phase(RoundPhase.PLAYER_TURNS)
        if hand not in player.hands:
            raise InvalidAction(f"Hand does not belong to {player}")
        if hand.state != HandState.ACTIVE:
            raise InvalidAction(f"Hand is {hand.state}")
