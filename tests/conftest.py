"""
Splendor Engine - Test Configuration and Fixtures

Common sessions and state-building helpers for all test modules.
"""

import numpy as np
import pytest

from splendor_engine.card import DevelopmentCard
from splendor_engine.constants import ALL_TOKEN_COLORS, GemColor
from splendor_engine.session import SetupOptions, create_session
from splendor_engine.tokens import GemTokens


# =============================================================================
# SESSIONS
# =============================================================================

@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def session(rng):
    """Two-player session created from seed 42."""
    return create_session(SetupOptions(player_count=2), rng)


@pytest.fixture
def session_3p():
    return create_session(SetupOptions(player_count=3), np.random.default_rng(7))


# =============================================================================
# STATE HELPERS
# =============================================================================

@pytest.fixture
def give_tokens():
    """
    Moves tokens from the supply to a player, keeping the session's token
    totals intact.
    """
    def _give(session, player_index, **counts):
        bag = GemTokens(counts)
        session.players[player_index].tokens = session.players[player_index].tokens + bag
        session.token_supply = session.token_supply - bag
        return bag
    return _give


@pytest.fixture
def make_card():
    """Builds an off-table card; ids start at 900 so they never clash with the real deck."""
    counter = iter(range(900, 1000))

    def _make(bonus=GemColor.RUBY, points=0, tier=1, **cost):
        return DevelopmentCard(id=next(counter), tier=tier, bonus=GemColor(bonus), points=points,
                               cost=GemTokens(cost))
    return _make


def token_totals(session):
    """Supply plus every player's holding, per color."""
    totals = {}
    for color in ALL_TOKEN_COLORS:
        totals[color] = session.token_supply[color] + sum(p.tokens[color] for p in session.players)
    return totals


@pytest.fixture
def assert_conserved():
    def _check(session):
        totals = token_totals(session)
        for color in ALL_TOKEN_COLORS:
            assert totals[color] == session.initial_supply[color], color
            assert session.token_supply[color] >= 0
            for player in session.players:
                assert player.tokens[color] >= 0
    return _check
