"""Chip ledger for the main pot and side pots.

Chips land in a pot the moment they leave a stack. Within a betting round the
ledger keeps contiguous contribution bands ``(floor, ceiling]``, each feeding one
pot. An all-in at a level strictly inside a band splits it: the part above the
all-in level moves to a new side pot that the all-in player cannot win. With
several all-ins at different levels this yields one pot per distinct level,
each with a narrower eligible set than the one below it.
"""

from __future__ import annotations

from typing import List, Optional

from .models import Player, Pot, PotTier, Table


def open_ledger(table: Table, pot: Pot) -> None:
    """Start a betting round with a single open band feeding ``pot``."""
    table.pot_tiers = [PotTier(floor=0, ceiling=None, pot=pot)]


def top_pot(table: Table) -> Pot:
    """The pot taking chips above every all-in level so far."""
    for tier in reversed(table.pot_tiers):
        if tier.ceiling is None:
            return tier.pot
    return table.pots()[-1]


def commit_chips(table: Table, player: Player, amount: int) -> int:
    """Move up to ``amount`` chips from the player's stack into the pots.

    Returns the number of chips moved. A player whose stack reaches zero is
    marked all-in and capped at their committed level.
    """
    amount = min(amount, player.stack)
    if amount <= 0:
        return 0
    tiers = _tiers(table)

    before = player.committed
    player.stack -= amount
    player.committed += amount
    player.total_in_pot += amount
    after = player.committed

    if player.stack == 0:
        player.is_all_in = True
        _split_at(table, tiers, after, player)

    for tier in tiers:
        low = max(before, tier.floor)
        high = after if tier.ceiling is None else min(after, tier.ceiling)
        if high > low:
            tier.pot.amount += high - low

    if player.is_all_in:
        _exclude_above(tiers, after, player.player_id)
    return amount


def _tiers(table: Table) -> List[PotTier]:
    if not table.pot_tiers:
        open_ledger(table, table.pots()[-1])
    return table.pot_tiers


def _split_at(table: Table, tiers: List[PotTier], level: int, player: Player) -> Optional[Pot]:
    for idx, tier in enumerate(tiers):
        if tier.floor < level and (tier.ceiling is None or level < tier.ceiling):
            side_pot = Pot(
                amount=0,
                eligible_players=tier.pot.eligible_players - {player.player_id},
                created_in_round=table.current_round,
            )
            # Chips others already put in above the all-in level belong to the new pot.
            moved = sum(_overlap(other.committed, level, tier.ceiling) for other in table.players if other is not player)
            tier.pot.amount -= moved
            side_pot.amount += moved

            tiers.insert(idx + 1, PotTier(floor=level, ceiling=tier.ceiling, pot=side_pot))
            tier.ceiling = level
            table.side_pots.append(side_pot)
            return side_pot
    return None


def _exclude_above(tiers: List[PotTier], level: int, player_id: int) -> None:
    for tier in tiers:
        if tier.floor >= level and player_id in tier.pot.eligible_players:
            tier.pot.eligible_players = tier.pot.eligible_players - {player_id}


def _overlap(committed: int, floor: int, ceiling: Optional[int]) -> int:
    top = committed if ceiling is None else min(committed, ceiling)
    return max(0, top - floor)
