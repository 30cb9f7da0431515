# splendor_engine/constants.py

"""
Global Constants for the Splendor Game Logic

This file defines all the 'magic numbers' and configuration settings
for the game rules, plus the fixed card and noble tables. All other
modules should import these constants instead of hard-coding values.
"""

from enum import Enum

# --- Game Setup ---

# Player configuration
MIN_PLAYERS = 2
MAX_PLAYERS = 4

# Token supply based on player count
# (Num Players) -> (Gold tokens, tokens of each gem color)
SETUP_CONFIG = {
    2: {'gold': 5, 'gems': 4},
    3: {'gold': 5, 'gems': 5},
    4: {'gold': 5, 'gems': 7},
}

# --- Card and Noble Constants ---

TIERS = (1, 2, 3)
MARKET_SIZE = 4

NOBLE_POINTS = 3

# --- Player State ---

# Maximum number of tokens a player can hold at the end of their turn
MAX_TOKENS = 10

# Maximum number of cards a player can reserve
MAX_RESERVED = 3

# --- Win Condition ---

# The prestige a player must reach to trigger the final round
WIN_THRESHOLD = 15

# --- Gem (Color) Definitions ---


class GemColor(Enum):
    """Enumeration of all token colors, including Gold."""
    # Standard gems
    EMERALD = "emerald"
    SAPPHIRE = "sapphire"
    RUBY = "ruby"
    DIAMOND = "diamond"
    ONYX = "onyx"
    # Wildcard
    GOLD = "gold"

    @classmethod
    def get_standard_gems(cls):
        """Returns a list of all standard (non-gold) gem colors."""
        return [cls.EMERALD, cls.SAPPHIRE, cls.RUBY, cls.DIAMOND, cls.ONYX]

    @classmethod
    def get_all_gems(cls):
        """Returns a list of all token colors, including gold."""
        return [cls.EMERALD, cls.SAPPHIRE, cls.RUBY, cls.DIAMOND, cls.ONYX, cls.GOLD]


GEM_COLORS = tuple(GemColor.get_standard_gems())
ALL_TOKEN_COLORS = tuple(GemColor.get_all_gems())

# Short single-letter codes used in card labels
GEM_ABBREVIATIONS = {
    GemColor.EMERALD: "G",
    GemColor.SAPPHIRE: "U",
    GemColor.RUBY: "R",
    GemColor.DIAMOND: "W",
    GemColor.ONYX: "K",
    GemColor.GOLD: "$",
}

_E = GemColor.EMERALD
_S = GemColor.SAPPHIRE
_R = GemColor.RUBY
_D = GemColor.DIAMOND
_O = GemColor.ONYX

# --- Private Hard-coded Game Data ---
# Format: (points, bonus, cost_dict). Card ids are assigned in table order.

_TIER_1_CARDS_DATA = [
    # Diamond bonus
    (0, _D, {_S: 1, _E: 1, _R: 1, _O: 1}),
    (0, _D, {_S: 2, _E: 1, _O: 1}),
    (0, _D, {_S: 2, _O: 2}),
    (0, _D, {_S: 3}),
    (0, _D, {_R: 2, _O: 1}),
    (0, _D, {_S: 1, _E: 2, _R: 1, _O: 1}),
    (0, _D, {_E: 2, _R: 1}),
    (1, _D, {_E: 4}),

    # Sapphire bonus
    (0, _S, {_D: 1, _E: 1, _R: 1, _O: 1}),
    (0, _S, {_D: 1, _E: 1, _R: 2, _O: 1}),
    (0, _S, {_D: 1, _O: 2}),
    (0, _S, {_E: 2, _R: 2}),
    (0, _S, {_O: 3}),
    (0, _S, {_D: 2, _E: 2}),
    (0, _S, {_E: 1, _R: 2, _O: 2}),
    (1, _S, {_R: 4}),

    # Emerald bonus
    (0, _E, {_D: 1, _S: 1, _R: 1, _O: 1}),
    (0, _E, {_D: 2, _S: 1, _O: 1}),
    (0, _E, {_D: 1, _S: 1, _R: 1, _O: 2}),
    (0, _E, {_R: 3}),
    (0, _E, {_D: 2, _S: 1, _R: 1}),
    (0, _E, {_S: 1, _R: 2, _O: 1}),
    (0, _E, {_D: 2, _R: 2}),
    (1, _E, {_O: 4}),

    # Ruby bonus
    (0, _R, {_D: 1, _S: 1, _E: 1, _O: 1}),
    (0, _R, {_D: 2, _E: 1, _O: 2}),
    (0, _R, {_D: 2, _E: 2}),
    (0, _R, {_D: 3}),
    (0, _R, {_D: 1, _R: 1, _O: 3}),
    (0, _R, {_D: 1, _S: 2, _E: 1, _O: 1}),
    (0, _R, {_S: 2, _E: 1}),
    (1, _R, {_D: 4}),

    # Onyx bonus
    (0, _O, {_D: 1, _S: 1, _E: 1, _R: 1}),
    (0, _O, {_E: 3}),
    (0, _O, {_D: 2, _S: 2}),
    (0, _O, {_E: 1, _R: 2, _O: 1}),
    (0, _O, {_D: 1, _S: 2, _E: 1, _R: 1}),
    (0, _O, {_E: 2, _R: 1}),
    (0, _O, {_D: 2, _E: 2}),
    (1, _O, {_S: 4}),
]

_TIER_2_CARDS_DATA = [
    # Diamond bonus
    (1, _D, {_E: 2, _R: 1, _O: 3}),
    (1, _D, {_S: 2, _E: 2, _R: 3}),
    (2, _D, {_E: 1, _R: 4, _O: 2}),
    (2, _D, {_R: 5}),
    (2, _D, {_R: 5, _O: 3}),
    (3, _D, {_D: 6}),

    # Sapphire bonus
    (1, _S, {_D: 2, _E: 3, _O: 1}),
    (1, _S, {_D: 3, _E: 2, _O: 2}),
    (2, _S, {_S: 2, _E: 2, _O: 3}),
    (2, _S, {_D: 5}),
    (2, _S, {_D: 2, _R: 1, _O: 4}),
    (3, _S, {_S: 6}),

    # Emerald bonus
    (1, _E, {_D: 3, _S: 1, _R: 2}),
    (1, _E, {_D: 2, _S: 3, _R: 2}),
    (2, _E, {_D: 4, _S: 2, _O: 1}),
    (2, _E, {_E: 5}),
    (2, _E, {_D: 3, _E: 2, _R: 3}),
    (3, _E, {_E: 6}),

    # Ruby bonus
    (1, _R, {_D: 1, _S: 3, _E: 1}),
    (1, _R, {_S: 3, _R: 2, _O: 3}),
    (2, _R, {_D: 1, _S: 4, _E: 2}),
    (2, _R, {_O: 5}),
    (2, _R, {_D: 3, _O: 5}),
    (3, _R, {_R: 6}),

    # Onyx bonus
    (1, _O, {_D: 1, _S: 1, _E: 3, _R: 2}),
    (1, _O, {_D: 2, _S: 1, _E: 1, _R: 3}),
    (2, _O, {_E: 5, _R: 3}),
    (2, _O, {_S: 5}),
    (2, _O, {_D: 2, _E: 4, _O: 1}),
    (3, _O, {_O: 6}),
]

_TIER_3_CARDS_DATA = [
    # Diamond bonus
    (3, _D, {_S: 3, _E: 3, _R: 5, _O: 3}),
    (4, _D, {_D: 3, _R: 3, _O: 6}),
    (4, _D, {_O: 7}),
    (5, _D, {_D: 3, _O: 7}),

    # Sapphire bonus
    (3, _S, {_D: 3, _E: 3, _R: 3, _O: 5}),
    (4, _S, {_D: 6, _S: 3, _O: 3}),
    (4, _S, {_D: 7}),
    (5, _S, {_D: 7, _S: 3}),

    # Emerald bonus
    (3, _E, {_D: 5, _S: 3, _R: 3, _O: 3}),
    (4, _E, {_S: 7}),
    (4, _E, {_D: 3, _S: 6, _E: 3}),
    (5, _E, {_S: 7, _E: 3}),

    # Ruby bonus
    (3, _R, {_D: 3, _S: 5, _E: 3, _O: 3}),
    (4, _R, {_E: 7}),
    (4, _R, {_S: 3, _E: 6, _R: 3}),
    (5, _R, {_E: 7, _R: 3}),

    # Onyx bonus
    (3, _O, {_D: 3, _S: 3, _E: 5, _R: 3}),
    (4, _O, {_R: 7}),
    (4, _O, {_E: 3, _R: 6, _O: 3}),
    (5, _O, {_R: 7, _O: 3}),
]

# Format: requirement dict (bonus counts). Every noble is worth NOBLE_POINTS.
_NOBLES_DATA = [
    {_D: 4, _S: 4},
    {_S: 4, _E: 4},
    {_E: 4, _R: 4},
    {_R: 4, _O: 4},
    {_D: 4, _O: 4},
    {_D: 3, _S: 3, _O: 3},
    {_S: 3, _E: 3, _R: 3},
    {_E: 3, _R: 3, _O: 3},
    {_D: 3, _S: 3, _E: 3},
    {_D: 3, _E: 3, _O: 3},
]

TIER_CARD_COUNTS = {1: 40, 2: 30, 3: 20}
TOTAL_CARD_COUNT = 90
TOTAL_NOBLE_COUNT = 10
