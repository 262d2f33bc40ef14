from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple, Union

from . import pots
from .cards import Deck, cards_to_labels
from .errors import InsufficientCardsError, ValidationError
from .models import (
    BOARD_SIZE,
    CARDS_DEALT,
    NEXT_ROUND,
    ActionType,
    BettingRound,
    EventType,
    LogEntry,
    Payout,
    Player,
    PlayerAction,
    Pot,
    Round,
    Table,
    TableConfig,
    TableEvent,
)
from .showdown import resolve_showdown

LOGGER = logging.getLogger("holdem.game")

# GameEngine owns the table and the deck and is the only thing that mutates them.


class GameEngine:
    """No-Limit Texas Hold'em engine for a single table."""

    def __init__(self, config: Optional[TableConfig] = None, deck: Optional[Deck] = None) -> None:
        self.config = config or TableConfig()
        self.table = Table(config=self.config)
        self.deck = deck or Deck()
        self._next_player_id = 1

    # Seat management -------------------------------------------------

    def add_player(self, name: str, stack: Optional[int] = None) -> Player:
        display = name.strip()
        if not display:
            raise ValidationError("NAME_REQUIRED")
        if len(self.table.players) >= self.config.seats:
            raise ValidationError("Table is full")

        player = Player(
            player_id=self._next_player_id,
            name=display,
            stack=self.config.starting_stack if stack is None else stack,
        )
        if self.hand_in_progress():
            # Sits out until the next deal.
            player.is_folded = True
        self._next_player_id += 1
        self.table.players.append(player)
        LOGGER.info("Player %s joined as %r with %s chips", player.player_id, player.name, player.stack)
        return player

    def remove_player(self, player_id: int) -> Player:
        table = self.table
        player = table.find_player(player_id)
        if self.hand_in_progress() and player.is_live:
            raise ValidationError("Cannot leave during a hand")

        idx = table.index_of(player_id)
        if table.dealer == player_id:
            # Move the button back one seat.
            table.dealer = table.players[idx - 1].player_id if len(table.players) > 1 else None
        table.players.pop(idx)
        table.pending.discard(player_id)
        LOGGER.info("Player %s left with %s chips", player_id, player.stack)
        return player

    # Hand lifecycle --------------------------------------------------

    def hand_in_progress(self) -> bool:
        return self.table.hand_number > 0 and not self.table.hand_over

    def can_start_hand(self) -> bool:
        return len(self.table.players_with_chips()) >= 2

    def start_hand(self, seed: Optional[int] = None) -> Optional[Table]:
        """Set up a new hand: rotate the button, post blinds and deal hole cards.

        Does nothing and returns ``None`` when fewer than two players have chips.
        """
        if not self.can_start_hand():
            LOGGER.info("Not enough players with chips to start a hand")
            return None
        if self.hand_in_progress():
            raise ValidationError("Hand already in progress")

        table = self.table
        if seed is None:
            seed = self.deck.next_seed()
        self.deck.seed(seed)
        self.deck.reset()

        funded = table.players_with_chips()
        if len(self.deck) < 2 * len(funded):
            raise InsufficientCardsError(2 * len(funded), len(self.deck))
        for player in table.players:
            player.reset_for_hand()

        table.hand_number += 1
        table.hand_seed = seed
        table.board = []
        table.burn_pile = []
        table.current_round = Round.PREFLOP
        table.main_pot = Pot(eligible_players=frozenset(p.player_id for p in funded), created_in_round=Round.PREFLOP)
        table.side_pots = []
        table.betting = BettingRound(current_bet=0, min_bet=self.config.bb, last_raise=0)
        table.hand_over = False
        pots.open_ledger(table, table.main_pot)
        self._log(TableEvent(hand_number=table.hand_number, event=EventType.NEW_HAND))

        table.dealer = self._next_funded(table.dealer)
        table.small_blind = self._next_funded(table.dealer)
        table.big_blind = self._next_funded(table.small_blind)
        deal_order = self._rotation_after(table.dealer, funded)

        self._post_blind(table.find_player(table.small_blind), self.config.sb)
        self._post_blind(table.find_player(table.big_blind), self.config.bb)
        table.betting.current_bet = max([self.config.bb] + [p.committed for p in funded])

        self._deal_hole_cards(deal_order)
        table.current_player = table.next_active_after(table.big_blind)
        self._open_action()

        LOGGER.info(
            "Hand %s started (seed=%s) dealer=%s sb=%s bb=%s",
            table.hand_number,
            seed,
            table.dealer,
            table.small_blind,
            table.big_blind,
        )
        if self.is_betting_round_complete():
            # Blinds put everyone but at most one player all-in.
            self._advance_after_action()
        return table

    def _next_funded(self, after: Optional[int]) -> int:
        players = self.table.players
        if after is None or all(p.player_id != after for p in players):
            return next(p.player_id for p in players if p.stack > 0)
        start = self.table.index_of(after)
        for offset in range(1, len(players) + 1):
            candidate = players[(start + offset) % len(players)]
            if candidate.stack > 0:
                return candidate.player_id
        return after

    def _rotation_after(self, start: int, members: List[Player]) -> List[Player]:
        players = self.table.players
        first = self.table.index_of(start) + 1
        member_ids = {player.player_id for player in members}
        ordered = [players[(first + offset) % len(players)] for offset in range(len(players))]
        return [player for player in ordered if player.player_id in member_ids]

    def _post_blind(self, player: Player, amount: int) -> None:
        paid = pots.commit_chips(self.table, player, amount)
        action = ActionType.ALL_IN if player.is_all_in else ActionType.BET
        self._log(self._player_action(player, action, paid))

    def _deal_hole_cards(self, order: List[Player]) -> None:
        # One card per player per pass, two passes.
        for _ in range(2):
            for player in order:
                player.hand.append(self.deck.draw())

    def _open_action(self) -> None:
        table = self.table
        actionable = [p for p in table.players if p.is_live and p.can_act]
        if len(actionable) >= 2:
            table.pending = {p.player_id for p in actionable}
        else:
            # Nobody left to bet against; only an unmatched bet still needs an answer.
            table.pending = {p.player_id for p in actionable if p.committed < table.betting.current_bet}

    # Action handling -------------------------------------------------

    def fold(self, player_id: int) -> PlayerAction:
        player = self._actor(player_id)
        player.is_folded = True
        return self._record(player, ActionType.FOLD, 0)

    def check(self, player_id: int) -> PlayerAction:
        player = self._actor(player_id)
        if self.table.betting.current_bet > player.committed:
            self._reject(player, "Cannot check when facing a bet")
        return self._record(player, ActionType.CHECK, 0)

    def call(self, player_id: int) -> PlayerAction:
        player = self._actor(player_id)
        owed = self.table.betting.current_bet - player.committed
        if owed <= 0:
            self._reject(player, "Nothing to call")
        paid = pots.commit_chips(self.table, player, owed)
        return self._record(player, ActionType.ALL_IN if player.is_all_in else ActionType.CALL, paid)

    def bet(self, player_id: int, amount: int) -> PlayerAction:
        player = self._actor(player_id)
        betting = self.table.betting
        if betting.current_bet > 0:
            self._reject(player, "Cannot bet when there is already a bet")
        if amount < betting.min_bet:
            self._reject(player, f"Bet must be at least {betting.min_bet}")
        paid = pots.commit_chips(self.table, player, amount)
        self._raise_level(player)
        return self._record(player, ActionType.ALL_IN if player.is_all_in else ActionType.BET, paid)

    def raise_to(self, player_id: int, amount: int) -> PlayerAction:
        """Raise so the player's total commitment this round becomes ``amount``."""
        player = self._actor(player_id)
        betting = self.table.betting
        if betting.current_bet == 0:
            self._reject(player, "Cannot raise when there is no bet")
        minimum = self.min_raise_to()
        if amount < minimum:
            self._reject(player, f"Raise must be at least {minimum}")
        paid = pots.commit_chips(self.table, player, amount - player.committed)
        self._raise_level(player)
        return self._record(player, ActionType.ALL_IN if player.is_all_in else ActionType.RAISE, paid)

    def all_in(self, player_id: int) -> PlayerAction:
        """Commit the player's whole stack as a bet, raise or call, whichever fits."""
        player = self._actor(player_id)
        betting = self.table.betting
        if betting.current_bet == 0:
            return self.bet(player_id, max(player.stack, betting.min_bet))
        total = player.committed + player.stack
        if total <= betting.current_bet:
            return self.call(player_id)
        return self.raise_to(player_id, max(total, self.min_raise_to()))

    def min_raise_to(self) -> int:
        betting = self.table.betting
        return betting.current_bet + max(betting.last_raise, betting.min_bet)

    def _actor(self, player_id: int) -> Player:
        player = self.table.find_player(player_id)
        if not self.hand_in_progress():
            self._reject(player, "No hand in progress")
        if player.is_folded or player.is_all_in or len(player.hand) != 2:
            self._reject(player, "Player cannot act")
        return player

    def _reject(self, player: Player, reason: str) -> None:
        LOGGER.info("Rejected action from player %s: %s", player.player_id, reason)
        raise ValidationError(reason)

    def _raise_level(self, player: Player) -> None:
        table = self.table
        betting = table.betting
        level = player.committed
        if level <= betting.current_bet:
            return
        increment = level - betting.current_bet
        # A short all-in moves the bet without reopening the minimum raise.
        if increment >= max(betting.last_raise, betting.min_bet):
            betting.last_raise = increment
        betting.current_bet = level
        table.pending = {p.player_id for p in table.players if p.is_live and p.can_act and p is not player}

    def _record(self, player: Player, action: ActionType, amount: int) -> PlayerAction:
        table = self.table
        table.pending.discard(player.player_id)
        entry = self._player_action(player, action, amount)
        self._log(entry)
        table.current_player = table.next_active_after(player.player_id)
        LOGGER.debug("Player %s %s %s", player.player_id, action.value, amount)
        return entry

    def _player_action(self, player: Player, action: ActionType, amount: int) -> PlayerAction:
        return PlayerAction(
            hand_number=self.table.hand_number,
            round=self.table.current_round,
            player_id=player.player_id,
            action=action,
            amount=amount,
        )

    def _log(self, entry: LogEntry) -> None:
        self.table.action_log.append(entry)

    def legal_actions(self, player_id: int) -> Tuple[List[ActionType], Optional[int], Optional[int], Optional[int]]:
        """Legal moves plus helper numbers (amount to call, min/max bet or raise-to)."""
        player = self._actor(player_id)
        betting = self.table.betting

        legal: List[ActionType] = [ActionType.FOLD]
        owed = betting.current_bet - player.committed
        call_amount = None
        if owed <= 0:
            legal.append(ActionType.CHECK)
        else:
            legal.append(ActionType.CALL)
            call_amount = min(owed, player.stack)

        min_amount = max_amount = None
        if betting.current_bet == 0:
            if player.stack >= betting.min_bet:
                legal.append(ActionType.BET)
                min_amount, max_amount = betting.min_bet, player.stack
        else:
            minimum = self.min_raise_to()
            if player.committed + player.stack >= minimum:
                legal.append(ActionType.RAISE)
                min_amount, max_amount = minimum, player.committed + player.stack
        legal.append(ActionType.ALL_IN)
        return legal, call_amount, min_amount, max_amount

    def apply_action(
        self, player_id: int, action: Union[ActionType, str], amount: Optional[int] = None
    ) -> List[LogEntry]:
        """Apply one action, then move the hand along as far as it can go.

        Returns every log entry the call produced: the action itself, any board
        deals and, when the hand finishes, the payouts.
        """
        start = len(self.table.action_log)
        try:
            action = ActionType(action)
        except ValueError:
            raise ValidationError(f"Unsupported action {action}") from None

        if action is ActionType.FOLD:
            self.fold(player_id)
        elif action is ActionType.CHECK:
            self.check(player_id)
        elif action is ActionType.CALL:
            self.call(player_id)
        elif action is ActionType.ALL_IN:
            self.all_in(player_id)
        else:
            if amount is None:
                raise ValidationError(f"{action.value} requires amount")
            if action is ActionType.BET:
                self.bet(player_id, amount)
            else:
                self.raise_to(player_id, amount)

        self._advance_after_action()
        return self.table.action_log[start:]

    def _advance_after_action(self) -> None:
        table = self.table
        if len(table.live_players()) <= 1:
            self.resolve_showdown()
            return
        # Run the board out while nobody is left to act.
        while self.is_betting_round_complete() and table.current_round is not Round.SHOWDOWN:
            self.advance_round()
        if table.current_round is Round.SHOWDOWN and not table.hand_over:
            self.resolve_showdown()

    def is_betting_round_complete(self) -> bool:
        table = self.table
        return len(table.live_players()) <= 1 or not table.pending

    # Round progression -----------------------------------------------

    def advance_round(self) -> Round:
        """Move to the next round, burning one card and dealing the board cards."""
        table = self.table
        next_round = NEXT_ROUND.get(table.current_round)
        if next_round is None:
            return table.current_round

        count = CARDS_DEALT[next_round]
        cards = []
        if count:
            if len(self.deck) < count + 1:
                raise InsufficientCardsError(count + 1, len(self.deck))
            table.burn_pile.append(self.deck.draw())
            cards = self.deck.deal(count)
            table.board.extend(cards)
        assert len(table.board) == BOARD_SIZE[next_round]

        top = pots.top_pot(table)
        table.current_round = next_round
        for player in table.players:
            player.reset_for_round()
        table.betting = BettingRound(current_bet=0, min_bet=self.config.bb, last_raise=0)
        pots.open_ledger(table, top)
        self._log(TableEvent(hand_number=table.hand_number, event=EventType(next_round.value), cards=tuple(cards)))

        if next_round is Round.SHOWDOWN:
            table.pending.clear()
        else:
            if table.dealer is not None:
                table.current_player = table.next_active_after(table.dealer)
            self._open_action()
        LOGGER.debug("Hand %s advanced to %s board=%s", table.hand_number, next_round.value, cards_to_labels(table.board))
        return next_round

    # Showdown --------------------------------------------------------

    def resolve_showdown(self) -> List[Payout]:
        table = self.table
        if not self.hand_in_progress():
            raise ValidationError("No hand in progress")
        if len(table.live_players()) > 1:
            if len(table.board) < BOARD_SIZE[Round.RIVER]:
                raise ValidationError("Showdown needs a complete board")
            if table.pending:
                raise ValidationError("Showdown needs river betting to be complete")

        payouts = resolve_showdown(table)
        table.action_log.extend(payouts)
        table.hand_over = True
        table.pending.clear()
        for payout in payouts:
            LOGGER.info(
                "Hand %s: player %s wins %s%s",
                table.hand_number,
                payout.player_id,
                payout.amount,
                f" with {payout.hand}" if payout.hand else "",
            )
        return payouts

    # Public/Snapshot helpers -----------------------------------------

    @property
    def board(self) -> List[str]:
        return cards_to_labels(self.table.board)

    @property
    def current_round(self) -> Round:
        return self.table.current_round

    @property
    def players(self) -> List[Player]:
        return list(self.table.players)

    @property
    def action_log(self) -> Tuple[LogEntry, ...]:
        return tuple(self.table.action_log)

    def pot_total(self) -> int:
        return self.table.pot_total()

    def is_hand_complete(self) -> bool:
        return self.table.hand_over

    def is_match_over(self) -> bool:
        return len(self.table.players_with_chips()) <= 1

    def snapshot(self) -> Dict[str, object]:
        table = self.table
        betting = table.betting
        return {
            "hand_number": table.hand_number,
            "seed": table.hand_seed,
            "round": table.current_round.value,
            "board": cards_to_labels(table.board),
            "burned": len(table.burn_pile),
            "dealer": table.dealer,
            "small_blind": table.small_blind,
            "big_blind": table.big_blind,
            "current_player": table.current_player,
            "pot": table.pot_total(),
            "main_pot": table.main_pot.payload(),
            "side_pots": [pot.payload() for pot in table.side_pots],
            "current_bet": betting.current_bet,
            "min_bet": betting.min_bet,
            "last_raise": betting.last_raise,
            "hand_over": table.hand_over,
            "players": [
                {
                    "id": player.player_id,
                    "name": player.name,
                    "stack": player.stack,
                    "committed": player.committed,
                    "hole": cards_to_labels(player.hand),
                    "is_folded": player.is_folded,
                    "is_all_in": player.is_all_in,
                    "is_dealer": player.player_id == table.dealer,
                }
                for player in table.players
            ],
        }
