from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Set, Tuple, Union

from .cards import Card, cards_to_labels
from .errors import NotFoundError


class Round(str, Enum):
    PREFLOP = "PREFLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"


NEXT_ROUND: Dict[Round, Round] = {
    Round.PREFLOP: Round.FLOP,
    Round.FLOP: Round.TURN,
    Round.TURN: Round.RIVER,
    Round.RIVER: Round.SHOWDOWN,
}

# Community cards dealt on entering a round, and the board size it implies.
CARDS_DEALT: Dict[Round, int] = {Round.FLOP: 3, Round.TURN: 1, Round.RIVER: 1, Round.SHOWDOWN: 0}
BOARD_SIZE: Dict[Round, int] = {Round.PREFLOP: 0, Round.FLOP: 3, Round.TURN: 4, Round.RIVER: 5, Round.SHOWDOWN: 5}


class ActionType(str, Enum):
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    BET = "BET"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"


class EventType(str, Enum):
    NEW_HAND = "NEW_HAND"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"


@dataclass
class TableConfig:
    seats: int = 6
    starting_stack: int = 10_000
    sb: int = 50
    bb: int = 100


@dataclass
class Player:
    player_id: int
    name: str
    stack: int
    hand: List[Card] = field(default_factory=list)
    is_folded: bool = False
    is_all_in: bool = False
    committed: int = 0
    total_in_pot: int = 0

    def reset_for_hand(self) -> None:
        self.hand.clear()
        self.is_folded = False
        self.is_all_in = False
        self.committed = 0
        self.total_in_pot = 0

    def reset_for_round(self) -> None:
        self.committed = 0

    @property
    def is_live(self) -> bool:
        """Dealt into the current hand and not folded."""
        return len(self.hand) == 2 and not self.is_folded

    @property
    def can_act(self) -> bool:
        return not self.is_folded and not self.is_all_in and self.stack > 0


@dataclass(eq=False)
class Pot:
    amount: int = 0
    eligible_players: FrozenSet[int] = frozenset()
    created_in_round: Round = Round.PREFLOP

    def payload(self) -> Dict[str, object]:
        return {
            "amount": self.amount,
            "eligible": sorted(self.eligible_players),
            "created_in_round": self.created_in_round.value,
        }


@dataclass
class PotTier:
    # Contribution band (floor, ceiling] of the current round feeding ``pot``.
    floor: int
    ceiling: Optional[int]
    pot: Pot


@dataclass
class BettingRound:
    current_bet: int = 0
    min_bet: int = 0
    last_raise: int = 0


# Action log ---------------------------------------------------------------
# Player actions, payouts and table events each get their own record type.


@dataclass(frozen=True)
class PlayerAction:
    hand_number: int
    round: Round
    player_id: int
    action: ActionType
    amount: int = 0

    @property
    def kind(self) -> str:
        return self.action.value

    def payload(self) -> Dict[str, object]:
        return {"ev": self.kind, "player": self.player_id, "amount": self.amount, "round": self.round.value}


@dataclass(frozen=True)
class Payout:
    hand_number: int
    player_id: int
    amount: int
    pot_index: Optional[int]
    hand: Optional[str] = None

    @property
    def kind(self) -> str:
        return "POT_AWARD"

    def payload(self) -> Dict[str, object]:
        return {
            "ev": self.kind,
            "player": self.player_id,
            "amount": self.amount,
            "pot": self.pot_index,
            "hand": self.hand,
        }


@dataclass(frozen=True)
class TableEvent:
    hand_number: int
    event: EventType
    cards: Tuple[Card, ...] = ()

    @property
    def kind(self) -> str:
        return self.event.value

    def payload(self) -> Dict[str, object]:
        return {"ev": self.kind, "hand_number": self.hand_number, "cards": cards_to_labels(self.cards)}


LogEntry = Union[PlayerAction, Payout, TableEvent]


@dataclass
class Table:
    config: TableConfig
    players: List[Player] = field(default_factory=list)
    dealer: Optional[int] = None
    small_blind: Optional[int] = None
    big_blind: Optional[int] = None
    current_player: Optional[int] = None
    hand_number: int = 0
    hand_seed: Optional[int] = None
    board: List[Card] = field(default_factory=list)
    burn_pile: List[Card] = field(default_factory=list)
    current_round: Round = Round.PREFLOP
    main_pot: Pot = field(default_factory=Pot)
    side_pots: List[Pot] = field(default_factory=list)
    betting: BettingRound = field(default_factory=BettingRound)
    action_log: List[LogEntry] = field(default_factory=list)
    # Ledger and turn bookkeeping for the round in progress.
    pot_tiers: List[PotTier] = field(default_factory=list, repr=False)
    pending: Set[int] = field(default_factory=set, repr=False)
    hand_over: bool = False

    def find_player(self, player_id: int) -> Player:
        for player in self.players:
            if player.player_id == player_id:
                return player
        raise NotFoundError(player_id)

    def index_of(self, player_id: int) -> int:
        for idx, player in enumerate(self.players):
            if player.player_id == player_id:
                return idx
        raise NotFoundError(player_id)

    def pots(self) -> List[Pot]:
        """Main pot followed by side pots in creation order."""
        return [self.main_pot, *self.side_pots]

    def pot_total(self) -> int:
        return sum(pot.amount for pot in self.pots())

    def chip_total(self) -> int:
        return sum(player.stack for player in self.players) + self.pot_total()

    def players_with_chips(self) -> List[Player]:
        return [player for player in self.players if player.stack > 0]

    def live_players(self) -> List[Player]:
        return [player for player in self.players if player.is_live]

    def next_active_after(self, player_id: int) -> int:
        """Next player clockwise who can still act; ``player_id`` itself if nobody can."""
        start = self.index_of(player_id)
        count = len(self.players)
        for offset in range(1, count + 1):
            candidate = self.players[(start + offset) % count]
            if candidate.can_act:
                return candidate.player_id
        return player_id
