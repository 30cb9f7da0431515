"""
Splendor Engine - Session Setup Tests
"""

import numpy as np
import pytest

from splendor_engine.constants import GEM_COLORS, GemColor, MARKET_SIZE, TIERS
from splendor_engine.errors import SetupError
from splendor_engine.session import Phase, SetupOptions, create_session, create_token_supply


def _all_card_ids(session):
    ids = []
    for tier in TIERS:
        row = session.market[tier]
        ids.extend(card.id for card in row.cards())
        ids.extend(card.id for card in row.deck)
    return ids


class TestSetupOptions:

    @pytest.mark.parametrize("count", [0, 1, 5])
    def test_invalid_player_count(self, count):
        with pytest.raises(SetupError):
            SetupOptions(player_count=count)

    def test_name_count_mismatch(self):
        with pytest.raises(SetupError):
            SetupOptions(player_count=3, player_names=["a", "b"])

    def test_ai_flag_count_mismatch(self):
        with pytest.raises(SetupError):
            SetupOptions(player_count=2, ai_flags=[True])

    def test_default_names_and_flags(self):
        options = SetupOptions(player_count=3)
        assert options.resolved_names() == ["Player", "AI 1", "AI 2"]
        assert options.resolved_ai_flags() == [False, True, True]

    def test_setup_error_is_value_error(self):
        with pytest.raises(ValueError):
            SetupOptions(player_count=9)


class TestTokenSupply:

    @pytest.mark.parametrize("count,gems", [(2, 4), (3, 5), (4, 7)])
    def test_supply_by_player_count(self, count, gems):
        supply = create_token_supply(count)
        assert all(supply[c] == gems for c in GEM_COLORS)
        assert supply[GemColor.GOLD] == 5


class TestCreateSession:

    def test_requires_rng(self):
        with pytest.raises(SetupError):
            create_session(SetupOptions())

    def test_initial_state(self, session):
        assert session.phase == Phase.PLAYING
        assert session.current_player_index == 0
        assert session.starting_player_index == 0
        assert session.trigger_player_index == -1
        assert session.num_players == 2
        assert session.initial_supply == session.token_supply

    def test_players_start_empty(self, session):
        for player in session.players:
            assert player.tokens.total() == 0
            assert player.purchased_cards == []
            assert player.reserved_cards == []
            assert player.nobles == []

    def test_names_and_flags_applied(self):
        options = SetupOptions(player_count=2, player_names=["Human", "AI"], ai_flags=[False, True])
        session = create_session(options, np.random.default_rng(0))
        assert [p.name for p in session.players] == ["Human", "AI"]
        assert [p.is_ai for p in session.players] == [False, True]

    @pytest.mark.parametrize("tier,deck_size", [(1, 36), (2, 26), (3, 16)])
    def test_market_dealt(self, session, tier, deck_size):
        row = session.market[tier]
        assert len(row.visible) == MARKET_SIZE
        assert all(card is not None and card.tier == tier for card in row.visible)
        assert len(row.deck) == deck_size

    def test_every_card_dealt_once(self, session):
        ids = _all_card_ids(session)
        assert sorted(ids) == list(range(1, 91))

    @pytest.mark.parametrize("count", [2, 3, 4])
    def test_noble_count(self, count):
        session = create_session(SetupOptions(player_count=count), np.random.default_rng(count))
        assert len(session.nobles) == count + 1

    def test_same_seed_same_setup(self):
        a = create_session(SetupOptions(), np.random.default_rng(11))
        b = create_session(SetupOptions(), np.random.default_rng(11))
        assert _all_card_ids(a) == _all_card_ids(b)
        assert [n.id for n in a.nobles] == [n.id for n in b.nobles]

    def test_different_seed_different_setup(self):
        a = create_session(SetupOptions(), np.random.default_rng(1))
        b = create_session(SetupOptions(), np.random.default_rng(2))
        assert _all_card_ids(a) != _all_card_ids(b)
