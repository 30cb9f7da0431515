# splendor_engine/board.py

"""
Defines MarketRow, one tier of the card market.

Each row always has exactly MARKET_SIZE visible slots. A slot holds a card
or None once the tier's deck has run out.
"""

from typing import List, Optional

from .constants import MARKET_SIZE
from .card import DevelopmentCard, card_label


class MarketRow:
    """
    Visible slots plus the remaining (face-down) deck of a single tier.
    The top of the deck is the end of the list.
    """

    def __init__(self, tier: int, deck: List[DevelopmentCard]):
        self.tier = tier
        self.deck: List[DevelopmentCard] = deck
        self.visible: List[Optional[DevelopmentCard]] = [self.draw_card_from_deck() for _ in range(MARKET_SIZE)]

    def draw_card_from_deck(self) -> Optional[DevelopmentCard]:
        """
        Draws one card from the top of the deck.
        Returns None if the deck is empty.
        """
        if self.deck:
            return self.deck.pop()
        return None

    def index_of(self, card_id: int) -> int:
        for index, card in enumerate(self.visible):
            if card is not None and card.id == card_id:
                return index
        return -1

    def take_visible(self, index: int) -> DevelopmentCard:
        """
        Removes the card in slot `index` and refills the slot from the deck.
        If the deck is empty, the slot becomes empty (None).
        """
        if not (0 <= index < MARKET_SIZE):
            raise IndexError(f"Invalid market slot: {index}. Must be 0-{MARKET_SIZE - 1}.")
        card = self.visible[index]
        if card is None:
            raise ValueError(f"Tier {self.tier} slot {index} is empty")
        self.visible[index] = self.draw_card_from_deck()
        return card

    def cards(self) -> List[DevelopmentCard]:
        return [card for card in self.visible if card is not None]

    def __repr__(self) -> str:
        rep_str = f"Tier {self.tier} Deck: ({len(self.deck)} cards left)\n"
        for i, card in enumerate(self.visible):
            rep_str += f"  [{i}]: {card_label(card) if card else '(Empty)'}\n"
        return rep_str
