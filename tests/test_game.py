"""
Splendor Engine - Turn Execution, Discard and Endgame Tests
"""

import numpy as np
import pytest

from splendor_engine.actions import TurnAction, get_legal_actions
from splendor_engine.card import NobleTile
from splendor_engine.constants import GemColor
from splendor_engine.errors import InvalidActionError, InvalidDiscardError
from splendor_engine.game import discard_tokens, execute_turn
from splendor_engine.queries import get_winner_index, prestige
from splendor_engine.session import Phase, SetupOptions, create_session
from splendor_engine.tokens import GemTokens


# === Reference scenarios ===


class TestOpeningTurn:
    """Seed 42, two players, first player takes ruby / emerald / sapphire."""

    def test_initial_supply(self, session):
        assert session.token_supply == GemTokens(emerald=4, sapphire=4, ruby=4, diamond=4, onyx=4, gold=5)
        assert len(session.market[1].deck) == 36

    def test_take_three(self, session, assert_conserved):
        result = execute_turn(session, TurnAction.take_different("ruby", "emerald", "sapphire"))
        assert result.game_over is False
        assert result.tokens_over_limit == 0
        assert session.token_supply[GemColor.RUBY] == 3
        assert session.token_supply[GemColor.EMERALD] == 3
        assert session.token_supply[GemColor.SAPPHIRE] == 3
        assert session.players[0].tokens == GemTokens(ruby=1, emerald=1, sapphire=1)
        assert session.current_player_index == 1
        assert_conserved(session)


class TestTokenLimit:
    """A player on 9 tokens takes 3 and has to discard 2."""

    @pytest.fixture
    def over_limit(self, session, give_tokens):
        give_tokens(session, 0, diamond=3, onyx=3, emerald=3)
        result = execute_turn(session, TurnAction.take_different("ruby", "sapphire", "emerald"))
        return session, result

    def test_turn_does_not_advance(self, over_limit):
        session, result = over_limit
        assert result.tokens_over_limit == 2
        assert result.discard_pending
        assert session.current_player_index == 0
        assert session.players[0].token_total() == 12

    def test_exact_discard_advances(self, over_limit, assert_conserved):
        session, _ = over_limit
        result = discard_tokens(session, GemTokens(diamond=2))
        assert result.tokens_over_limit == 0
        assert result.action is None
        assert session.current_player_index == 1
        assert session.players[0].token_total() == 10
        assert_conserved(session)

    def test_plain_dict_accepted(self, over_limit):
        session, _ = over_limit
        discard_tokens(session, {"onyx": 1, "ruby": 1})
        assert session.current_player_index == 1

    @pytest.mark.parametrize("bag", [
        {"diamond": 1},
        {"diamond": 3},
        {"gold": 2},
        {"ruby": 2},
        {"diamond": 3, "onyx": -1},
        {"pearl": 2},
        {"diamond": 1.5, "onyx": 0.5},
        {"diamond": "2"},
    ])
    def test_bad_discard_rejected_without_change(self, over_limit, bag):
        session, _ = over_limit
        tokens = session.players[0].tokens
        supply = session.token_supply
        with pytest.raises(InvalidDiscardError):
            discard_tokens(session, bag)
        assert session.players[0].tokens == tokens
        assert session.token_supply == supply
        assert session.current_player_index == 0

    def test_numpy_counts_accepted(self, over_limit):
        session, _ = over_limit
        discard_tokens(session, {"diamond": np.int64(2)})
        assert session.current_player_index == 1
        assert session.players[0].tokens[GemColor.DIAMOND] == 1

    def test_discard_without_pending(self, session):
        with pytest.raises(InvalidDiscardError):
            discard_tokens(session, {})


class TestReservedPurchase:
    """Buying a zero-cost reserved card moves the card and leaves tokens alone."""

    def test_free_reserved_card(self, session, give_tokens, make_card):
        card = make_card(bonus="onyx")
        give_tokens(session, 0, ruby=1)
        session.players[0].reserved_cards.append(card)
        execute_turn(session, TurnAction.purchase(card.id))
        player = session.players[0]
        assert player.reserved_cards == []
        assert player.purchased_cards == [card]
        assert player.tokens == GemTokens(ruby=1)


# === Executor ===


class TestPurchase:

    def test_gold_pays_shortfall(self, session, give_tokens, make_card, assert_conserved):
        card = make_card(bonus="onyx", points=1, ruby=2, emerald=1)
        give_tokens(session, 0, ruby=1, emerald=1, gold=1)
        session.players[0].reserved_cards.append(card)
        execute_turn(session, TurnAction.purchase(card.id))
        assert session.players[0].tokens == GemTokens()
        assert session.token_supply[GemColor.GOLD] == 5
        assert prestige(session.players[0]) == 1
        assert_conserved(session)

    def test_colored_tokens_spent_before_gold(self, session, give_tokens, make_card):
        card = make_card(ruby=2)
        give_tokens(session, 0, ruby=2, gold=2)
        session.players[0].reserved_cards.append(card)
        execute_turn(session, TurnAction.purchase(card.id))
        assert session.players[0].tokens == GemTokens(gold=2)

    def test_bonuses_discount(self, session, give_tokens, make_card):
        player = session.players[0]
        player.purchased_cards = [make_card(bonus="ruby")]
        card = make_card(ruby=2)
        give_tokens(session, 0, ruby=1)
        player.reserved_cards.append(card)
        execute_turn(session, TurnAction.purchase(card.id))
        assert player.tokens == GemTokens()

    def test_market_purchase_refills_slot(self, session, give_tokens):
        row = session.market[1]
        card = row.visible[2]
        give_tokens(session, 0, gold=5)
        next_card = row.deck[-1]
        execute_turn(session, TurnAction.purchase(card.id))
        assert row.visible[2] is next_card
        assert len(row.deck) == 35
        assert card in session.players[0].purchased_cards

    def test_unaffordable_rejected_without_change(self, session):
        card = session.market[3].visible[0]
        with pytest.raises(InvalidActionError) as exc_info:
            execute_turn(session, TurnAction.purchase(card.id))
        assert exc_info.value.reason == "Cannot afford this card"
        assert session.market[3].visible[0] is card
        assert session.current_player_index == 0


class TestReserve:

    def test_market_reserve_gives_gold(self, session, assert_conserved):
        card = session.market[2].visible[1]
        execute_turn(session, TurnAction.reserve(card_id=card.id))
        player = session.players[0]
        assert player.reserved_cards == [card]
        assert player.tokens == GemTokens(gold=1)
        assert session.market[2].visible[1] is not card
        assert_conserved(session)

    def test_deck_reserve_takes_top(self, session):
        top = session.market[3].deck[-1]
        execute_turn(session, TurnAction.reserve(tier=3))
        assert session.players[0].reserved_cards == [top]
        assert len(session.market[3].deck) == 15

    def test_no_gold_left(self, session):
        session.token_supply = session.token_supply - GemTokens(gold=5)
        execute_turn(session, TurnAction.reserve(tier=1))
        assert session.players[0].tokens[GemColor.GOLD] == 0
        assert len(session.players[0].reserved_cards) == 1

    def test_empty_slot_after_deck_runs_out(self, session):
        row = session.market[3]
        row.deck.clear()
        card = row.visible[0]
        execute_turn(session, TurnAction.reserve(card_id=card.id))
        assert row.visible[0] is None
        assert len(row.cards()) == 3


class TestTakeSame:

    def test_takes_two(self, session):
        execute_turn(session, TurnAction.take_same("onyx"))
        assert session.players[0].tokens == GemTokens(onyx=2)
        assert session.token_supply[GemColor.ONYX] == 2


# === Nobles ===


class TestNobleVisit:

    @pytest.fixture
    def two_easy_nobles(self, session, make_card):
        first = NobleTile(id=101, requirements=GemTokens(ruby=1))
        second = NobleTile(id=102, requirements=GemTokens(ruby=1))
        session.nobles = [first, second]
        session.players[0].purchased_cards = [make_card(bonus="ruby")]
        return first, second

    def test_only_one_noble_per_turn(self, session, two_easy_nobles):
        first, second = two_easy_nobles
        result = execute_turn(session, TurnAction.take_different("emerald", "sapphire", "onyx"))
        assert result.noble_visit is first
        assert session.players[0].nobles == [first]
        assert session.nobles == [second]

    def test_second_noble_next_turn(self, session, two_easy_nobles):
        first, second = two_easy_nobles
        execute_turn(session, TurnAction.take_different("emerald", "sapphire", "onyx"))
        execute_turn(session, TurnAction.take_different("emerald", "sapphire", "onyx"))
        result = execute_turn(session, TurnAction.take_different("emerald", "sapphire", "diamond"))
        assert result.noble_visit is second
        assert session.nobles == []
        assert prestige(session.players[0]) == 6

    def test_no_visit_without_bonuses(self, session):
        result = execute_turn(session, TurnAction.take_different("emerald", "sapphire", "onyx"))
        assert result.noble_visit is None

    def test_visit_before_discard(self, session, two_easy_nobles, give_tokens):
        give_tokens(session, 0, diamond=3, onyx=3, emerald=3)
        result = execute_turn(session, TurnAction.take_different("ruby", "sapphire", "emerald"))
        assert result.discard_pending
        assert result.noble_visit is two_easy_nobles[0]


# === Endgame ===


def _give_prestige(player, make_card, points):
    player.purchased_cards.append(make_card(points=points, tier=3))


class TestEndgame:

    def test_fair_final_round(self, session_3p, make_card):
        session = session_3p
        session.current_player_index = 1
        _give_prestige(session.players[1], make_card, 15)

        result = execute_turn(session, TurnAction.take_different("ruby", "emerald", "onyx"))
        assert session.phase == Phase.FINAL_ROUND
        assert session.trigger_player_index == 1
        assert result.game_over is False
        assert session.current_player_index == 2

        result = execute_turn(session, TurnAction.take_different("ruby", "emerald", "onyx"))
        assert result.game_over is True
        assert session.phase == Phase.GAME_OVER
        # Not advanced past the last player of the round
        assert session.current_player_index == 2

    def test_last_seat_trigger_ends_immediately(self, session, make_card):
        session.current_player_index = 1
        _give_prestige(session.players[1], make_card, 16)
        result = execute_turn(session, TurnAction.take_different("ruby", "emerald", "onyx"))
        assert result.game_over
        assert get_winner_index(session) == 1

    def test_first_trigger_kept(self, session, make_card):
        _give_prestige(session.players[0], make_card, 15)
        execute_turn(session, TurnAction.take_different("ruby", "emerald", "onyx"))
        _give_prestige(session.players[1], make_card, 20)
        result = execute_turn(session, TurnAction.take_different("ruby", "emerald", "onyx"))
        assert session.trigger_player_index == 0
        assert result.game_over
        assert get_winner_index(session) == 1

    def test_trigger_after_discard(self, session, make_card, give_tokens):
        _give_prestige(session.players[0], make_card, 15)
        give_tokens(session, 0, diamond=3, onyx=3, emerald=3)
        execute_turn(session, TurnAction.take_different("ruby", "sapphire", "emerald"))
        assert session.phase == Phase.PLAYING
        discard_tokens(session, {"diamond": 2})
        assert session.phase == Phase.FINAL_ROUND
        assert session.current_player_index == 1

    def test_actions_rejected_after_game_over(self, session, make_card):
        session.current_player_index = 1
        _give_prestige(session.players[1], make_card, 15)
        execute_turn(session, TurnAction.take_different("ruby", "emerald", "onyx"))
        with pytest.raises(InvalidActionError):
            execute_turn(session, TurnAction.take_same("diamond"))
        with pytest.raises(InvalidDiscardError):
            discard_tokens(session, {"ruby": 1})


# === Invariants over random play ===


class TestRandomPlayInvariants:

    @pytest.mark.parametrize("seed", range(5))
    @pytest.mark.parametrize("player_count", [2, 4])
    def test_tokens_conserved(self, seed, player_count, assert_conserved):
        rng = np.random.default_rng(seed)
        session = create_session(SetupOptions(player_count=player_count), rng)
        for _ in range(200):
            if session.phase == Phase.GAME_OVER:
                break
            actions = get_legal_actions(session)
            if not actions:
                break
            result = execute_turn(session, actions[int(rng.integers(len(actions)))])
            if result.discard_pending:
                player = session.players[session.current_player_index]
                bag = {}
                remaining = result.tokens_over_limit
                for color, count in player.tokens.items():
                    take = min(count, remaining)
                    if take:
                        bag[color] = take
                        remaining -= take
                discard_tokens(session, bag)
            assert_conserved(session)
            for player in session.players:
                assert player.token_total() <= 10
                assert len(player.reserved_cards) <= 3
