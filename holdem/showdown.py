from __future__ import annotations

import logging
from typing import Dict, List

from .evaluator import EvaluatedHand, compare, evaluate_hand
from .models import Payout, Player, Table

LOGGER = logging.getLogger("holdem.showdown")


def resolve_showdown(table: Table) -> List[Payout]:
    """Award every pot and return one payout record per award.

    A lone surviving player takes all pots regardless of eligibility. Otherwise
    pots are settled in creation order (main pot first) among the eligible
    players still holding cards. Ties split evenly and the odd chips go to the
    first winner in seating order. A pot whose eligible players have all folded
    is contested by the players who contested the pot before it.
    """
    live = table.live_players()
    payouts: List[Payout] = []
    if not live:
        return payouts

    if len(live) == 1:
        winner = live[0]
        total = table.pot_total()
        for pot in table.pots():
            pot.amount = 0
        if total > 0:
            winner.stack += total
            payouts.append(Payout(hand_number=table.hand_number, player_id=winner.player_id, amount=total, pot_index=None))
        return payouts

    hands: Dict[int, EvaluatedHand] = {player.player_id: evaluate_hand(player.hand, table.board) for player in live}

    previous: List[Player] = live
    for index, pot in enumerate(table.pots()):
        contenders = [player for player in live if player.player_id in pot.eligible_players]
        if not contenders:
            # Everyone eligible folded: the pot rolls down to the pot below it.
            if pot.amount:
                LOGGER.info("Pot %s (%s chips) has no live contenders; rolling down to pot %s", index, pot.amount, index - 1)
            contenders = previous
        previous = contenders
        if pot.amount == 0:
            continue

        best = max(hands[player.player_id] for player in contenders)
        winners = [player for player in contenders if compare(hands[player.player_id], best) == 0]
        share, remainder = divmod(pot.amount, len(winners))
        for position, winner in enumerate(winners):
            award = share + (remainder if position == 0 else 0)
            winner.stack += award
            payouts.append(
                Payout(
                    hand_number=table.hand_number,
                    player_id=winner.player_id,
                    amount=award,
                    pot_index=index,
                    hand=hands[winner.player_id].describe(),
                )
            )
        pot.amount = 0
    return payouts
