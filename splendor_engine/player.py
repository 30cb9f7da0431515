# splendor_engine/player.py

"""
Defines PlayerState, one seat's holdings.

Only the turn engine (executor, noble check, discard step) mutates a
PlayerState; everything else reads it through the helpers in queries.py.
"""

from typing import List

from .constants import MAX_RESERVED, MAX_TOKENS
from .card import DevelopmentCard, NobleTile, card_label
from .tokens import GemTokens


class PlayerState:
    def __init__(self, name: str, is_ai: bool = False):
        self.name: str = name
        self.is_ai: bool = is_ai
        self.tokens: GemTokens = GemTokens()
        self.purchased_cards: List[DevelopmentCard] = []
        self.reserved_cards: List[DevelopmentCard] = []
        self.nobles: List[NobleTile] = []

    def token_total(self) -> int:
        return self.tokens.total()

    def tokens_over_limit(self) -> int:
        return max(0, self.tokens.total() - MAX_TOKENS)

    def can_reserve(self) -> bool:
        return len(self.reserved_cards) < MAX_RESERVED

    def __repr__(self) -> str:
        points = sum(c.points for c in self.purchased_cards) + sum(n.points for n in self.nobles)
        rep_str = f"--- {self.name}{' (AI)' if self.is_ai else ''} (Prestige: {points}) ---\n"
        rep_str += "Tokens: " + ", ".join(f"{c.value}: {v}" for c, v in self.tokens.items()) + "\n"
        rep_str += f"Cards: {len(self.purchased_cards)}\n"
        rep_str += "Reserved: " + ", ".join(card_label(c) for c in self.reserved_cards) + "\n"
        rep_str += f"Nobles: {len(self.nobles)}\n"
        rep_str += "-----------------------------"
        return rep_str
