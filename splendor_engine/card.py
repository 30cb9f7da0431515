# splendor_engine/card.py

"""
Defines the data structures for Development Cards and Noble Tiles.

The 90 development cards and 10 noble tiles are built once at import time
from the tables in constants.py. Shuffling always goes through an injected
numpy Generator so that setups are reproducible.
"""

from dataclasses import dataclass, field
from typing import Dict, List, MutableSequence, TypeVar

import numpy as np

from .constants import (
    GemColor,
    GEM_COLORS,
    GEM_ABBREVIATIONS,
    NOBLE_POINTS,
    TIERS,
    _TIER_1_CARDS_DATA,
    _TIER_2_CARDS_DATA,
    _TIER_3_CARDS_DATA,
    _NOBLES_DATA,
)
from .tokens import GemTokens

T = TypeVar("T")


@dataclass(frozen=True)
class DevelopmentCard:
    """
    Represents a single Development Card.
    Instances are immutable ('frozen=True').
    """
    id: int
    tier: int
    bonus: GemColor
    points: int
    cost: GemTokens = field(default_factory=GemTokens)

    def __repr__(self) -> str:
        return f"DevCard(#{self.id}, {card_label(self)})"


@dataclass(frozen=True)
class NobleTile:
    """
    Represents a single Noble Tile.
    Instances are immutable.
    """
    id: int
    requirements: GemTokens = field(default_factory=GemTokens)  # In *card bonuses*
    points: int = NOBLE_POINTS

    def __repr__(self) -> str:
        return f"Noble(#{self.id}, {noble_label(self)})"


def _build_cards() -> Dict[int, List[DevelopmentCard]]:
    cards: Dict[int, List[DevelopmentCard]] = {}
    next_id = 1
    for tier, data in zip(TIERS, (_TIER_1_CARDS_DATA, _TIER_2_CARDS_DATA, _TIER_3_CARDS_DATA)):
        cards[tier] = []
        for points, bonus, cost in data:
            cards[tier].append(DevelopmentCard(id=next_id, tier=tier, bonus=bonus, points=points, cost=GemTokens(cost)))
            next_id += 1
    return cards


CARDS_BY_TIER: Dict[int, List[DevelopmentCard]] = _build_cards()
ALL_DEVELOPMENT_CARDS: tuple = tuple(card for tier in TIERS for card in CARDS_BY_TIER[tier])
ALL_NOBLES: tuple = tuple(
    NobleTile(id=i, requirements=GemTokens(reqs)) for i, reqs in enumerate(_NOBLES_DATA, start=1)
)


def shuffle(items: MutableSequence[T], rng: np.random.Generator) -> MutableSequence[T]:
    """In-place Fisher-Yates shuffle driven by `rng`. Returns `items`."""
    for i in range(len(items) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        items[i], items[j] = items[j], items[i]
    return items


def create_tier_decks(rng: np.random.Generator) -> Dict[int, List[DevelopmentCard]]:
    """Fresh shuffled copies of each tier, shuffled in tier order 1, 2, 3."""
    return {tier: shuffle(list(CARDS_BY_TIER[tier]), rng) for tier in TIERS}


def select_nobles(player_count: int, rng: np.random.Generator) -> List[NobleTile]:
    """Shuffles the noble table and keeps player_count + 1 tiles."""
    nobles = shuffle(list(ALL_NOBLES), rng)
    return nobles[:player_count + 1]


# --- Display helpers ---

def gem_abbrev(color: GemColor) -> str:
    return GEM_ABBREVIATIONS[GemColor(color)]


def gem_display_name(color: GemColor) -> str:
    return GemColor(color).value.capitalize()


def format_cost(cost: GemTokens) -> str:
    """Short cost string such as '2W 3R 1K', or 'Free' for an empty cost."""
    parts = [f"{cost[c]}{gem_abbrev(c)}" for c in GEM_COLORS if cost[c] > 0]
    return " ".join(parts) or "Free"


def card_label(card: DevelopmentCard) -> str:
    pts = f" [{card.points}pt]" if card.points > 0 else ""
    return f"T{card.tier} {gem_abbrev(card.bonus)}{pts} ({format_cost(card.cost)})"


def noble_label(noble: NobleTile) -> str:
    return f"Noble [{noble.points}pt] ({format_cost(noble.requirements)})"
