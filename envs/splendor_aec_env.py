import itertools
import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from gymnasium.spaces import Box, Discrete
from pettingzoo.utils.env import AECEnv

from splendor_engine.actions import ActionType, TurnAction, get_legal_actions
from splendor_engine.card import DevelopmentCard, NobleTile
from splendor_engine.constants import (
    ALL_TOKEN_COLORS, GEM_COLORS, GemColor, MARKET_SIZE, MAX_PLAYERS, MAX_RESERVED, MAX_TOKENS, SETUP_CONFIG,
    TIER_CARD_COUNTS, TIERS, WIN_THRESHOLD,
)
from splendor_engine.errors import SplendorError
from splendor_engine.game import discard_tokens, execute_turn
from splendor_engine.queries import bonuses, find_card_in_market, find_reserved_card, get_winner_index, \
    is_game_over, prestige
from splendor_engine.session import Session, SetupOptions, create_session
from splendor_engine.tokens import GemTokens

logger = logging.getLogger(__name__)

# Catalogue entry kinds
TAKE_DIFFERENT = "take-different"
TAKE_SAME = "take-same"
PURCHASE_MARKET = "purchase-market"
PURCHASE_RESERVED = "purchase-reserved"
RESERVE_MARKET = "reserve-market"
RESERVE_DECK = "reserve-deck"
DISCARD = "discard"

# A turn adds at most 3 tokens to a hand of at most MAX_TOKENS
MAX_DISCARD = 3

TOTAL_ACTIONS = 143


def env(**kwargs):
    return SplendorEnv(**kwargs)


def raw_env(**kwargs):
    return SplendorEnv(**kwargs)


def build_action_catalogue() -> List[Tuple]:
    """
    Fixed integer -> action template table. Templates name market slots and
    reserved indexes, so they are resolved against the live session in step().
    """
    catalogue: List[Tuple] = []
    for k in [3, 2, 1]:
        for combo in itertools.combinations(GEM_COLORS, k):
            catalogue.append((TAKE_DIFFERENT, frozenset(combo)))
    for color in GEM_COLORS:
        catalogue.append((TAKE_SAME, color))
    for tier in TIERS:
        for slot in range(MARKET_SIZE):
            catalogue.append((PURCHASE_MARKET, tier, slot))
    for index in range(MAX_RESERVED):
        catalogue.append((PURCHASE_RESERVED, index))
    for tier in TIERS:
        for slot in range(MARKET_SIZE):
            catalogue.append((RESERVE_MARKET, tier, slot))
    for tier in TIERS:
        catalogue.append((RESERVE_DECK, tier))
    for size in range(1, MAX_DISCARD + 1):
        for combo in itertools.combinations_with_replacement(ALL_TOKEN_COLORS, size):
            bag: Dict[GemColor, int] = {}
            for color in combo:
                bag[color] = bag.get(color, 0) + 1
            catalogue.append((DISCARD, GemTokens(bag)))
    assert len(catalogue) == TOTAL_ACTIONS, f"Catalogue has {len(catalogue)} actions, expected {TOTAL_ACTIONS}"
    return catalogue


class SplendorEnv(AECEnv):
    metadata = {
        "name": "splendor_v1",
        "render_modes": ["human"],
        "is_parallelizable": False,
    }

    def __init__(self, num_players=2, render_mode=None):
        super().__init__()
        if not (2 <= num_players <= MAX_PLAYERS):
            raise ValueError(f"Invalid number of players: {num_players}")
        self.num_players = num_players
        self.render_mode = render_mode
        self.possible_agents = [f"player_{i}" for i in range(self.num_players)]
        self.agents = self.possible_agents[:]

        self.catalogue = build_action_catalogue()
        self.catalogue_index = {entry: i for i, entry in enumerate(self.catalogue)}
        self.action_spaces = {agent: Discrete(TOTAL_ACTIONS) for agent in self.possible_agents}

        self._card_feature_size = 2 + len(GEM_COLORS) + len(GEM_COLORS)
        self._noble_feature_size = 1 + len(GEM_COLORS)
        self._max_nobles = MAX_PLAYERS + 1
        self.OBS_VECTOR_SIZE = self.calculate_obs_size()
        self.observation_spaces = {
            agent: Box(low=0, high=1.0, shape=(self.OBS_VECTOR_SIZE,), dtype=np.float32)
            for agent in self.possible_agents
        }

        self.session: Optional[Session] = None
        self.rewards = {agent: 0.0 for agent in self.agents}
        self._cumulative_rewards = {agent: 0.0 for agent in self.agents}
        self.terminations = {agent: False for agent in self.agents}
        self.truncations = {agent: False for agent in self.agents}
        self.infos = {agent: {} for agent in self.agents}
        self.agent_selection: str = ""

    # --- Observation ---

    def calculate_obs_size(self) -> int:
        player_state_size = len(ALL_TOKEN_COLORS) + len(GEM_COLORS) + 1 + 1
        player_state_size += MAX_RESERVED * self._card_feature_size
        size = MAX_PLAYERS * player_state_size
        size += len(ALL_TOKEN_COLORS)
        size += len(TIERS)
        size += self._max_nobles * self._noble_feature_size
        size += len(TIERS) * MARKET_SIZE * self._card_feature_size
        # discard pending flag
        size += 1
        return size

    def encode_card(self, obs: np.ndarray, idx: int, card: DevelopmentCard) -> int:
        obs[idx] = card.tier / 3.0
        obs[idx + 1] = card.points / 5.0
        idx += 2
        obs[idx + GEM_COLORS.index(card.bonus)] = 1.0
        idx += len(GEM_COLORS)
        for color in GEM_COLORS:
            obs[idx] = card.cost[color] / 7.0
            idx += 1
        return idx

    def encode_noble(self, obs: np.ndarray, idx: int, noble: NobleTile) -> int:
        obs[idx] = noble.points / 3.0
        idx += 1
        for color in GEM_COLORS:
            obs[idx] = noble.requirements[color] / 4.0
            idx += 1
        return idx

    def get_obs_vector(self, player_index: int) -> np.ndarray:
        """Seats are encoded starting from `player_index`, so the observer is always first."""
        obs = np.zeros(self.OBS_VECTOR_SIZE, dtype=np.float32)
        session = self.session
        idx = 0
        player_state_size = 0
        for i in range(self.num_players):
            player = session.players[(player_index + i) % self.num_players]
            start = idx
            for color in ALL_TOKEN_COLORS:
                obs[idx] = player.tokens[color] / MAX_TOKENS
                idx += 1
            player_bonuses = bonuses(player)
            for color in GEM_COLORS:
                obs[idx] = player_bonuses[color] / 15.0
                idx += 1
            obs[idx] = prestige(player) / WIN_THRESHOLD
            obs[idx + 1] = len(player.reserved_cards) / MAX_RESERVED
            idx += 2
            for j in range(MAX_RESERVED):
                if j < len(player.reserved_cards):
                    idx = self.encode_card(obs, idx, player.reserved_cards[j])
                else:
                    idx += self._card_feature_size
            player_state_size = idx - start
        idx += (MAX_PLAYERS - self.num_players) * player_state_size

        max_supply = SETUP_CONFIG[MAX_PLAYERS]
        for color in GEM_COLORS:
            obs[idx] = session.token_supply[color] / max_supply['gems']
            idx += 1
        obs[idx] = session.token_supply[GemColor.GOLD] / max_supply['gold']
        idx += 1
        for tier in TIERS:
            obs[idx] = len(session.market[tier].deck) / TIER_CARD_COUNTS[tier]
            idx += 1
        for i in range(self._max_nobles):
            if i < len(session.nobles):
                idx = self.encode_noble(obs, idx, session.nobles[i])
            else:
                idx += self._noble_feature_size
        for tier in TIERS:
            for card in session.market[tier].visible:
                if card is not None:
                    idx = self.encode_card(obs, idx, card)
                else:
                    idx += self._card_feature_size
        obs[idx] = 1.0 if self._discard_pending() else 0.0
        idx += 1

        assert idx == self.OBS_VECTOR_SIZE, f"Observation size mismatch: {idx} != {self.OBS_VECTOR_SIZE}"
        return np.clip(obs, 0.0, 1.0)

    # --- Action mask ---

    def _discard_pending(self) -> bool:
        return self.session.players[self.session.current_player_index].tokens_over_limit() > 0

    def action_key(self, action: TurnAction) -> Tuple:
        """Catalogue key of a legal engine action in the current session."""
        player = self.session.players[self.session.current_player_index]
        if action.action_type == ActionType.TAKE_DIFFERENT:
            return (TAKE_DIFFERENT, frozenset(action.colors))
        if action.action_type == ActionType.TAKE_SAME:
            return (TAKE_SAME, action.color)
        if action.action_type == ActionType.RESERVE:
            if action.card_id is None:
                return (RESERVE_DECK, action.tier)
            return (RESERVE_MARKET,) + find_card_in_market(self.session, action.card_id)
        found = find_card_in_market(self.session, action.card_id)
        if found is not None:
            return (PURCHASE_MARKET,) + found
        return (PURCHASE_RESERVED, find_reserved_card(player, action.card_id))

    def get_action_mask(self) -> np.ndarray:
        mask = np.zeros(TOTAL_ACTIONS, dtype=np.int8)
        if self.session is None or is_game_over(self.session):
            return mask

        if self._discard_pending():
            player = self.session.players[self.session.current_player_index]
            excess = player.tokens_over_limit()
            for i, entry in enumerate(self.catalogue):
                if entry[0] != DISCARD:
                    continue
                bag = entry[1]
                if bag.total() == excess and all(bag[c] <= player.tokens[c] for c in bag):
                    mask[i] = 1
            return mask

        for action in get_legal_actions(self.session):
            key = self.action_key(action)
            if key in self.catalogue_index:
                mask[self.catalogue_index[key]] = 1
            else:
                logger.warning("Legal action %r has no catalogue entry (key %s)", action, key)
        return mask

    def resolve_action(self, action: int) -> Any:
        """Turns a catalogue index into a TurnAction, or a GemTokens bag for a discard."""
        entry = self.catalogue[action]
        kind = entry[0]
        if kind == TAKE_DIFFERENT:
            return TurnAction.take_different(*[c for c in GEM_COLORS if c in entry[1]])
        if kind == TAKE_SAME:
            return TurnAction.take_same(entry[1])
        if kind == PURCHASE_MARKET:
            return TurnAction.purchase(self.session.market[entry[1]].visible[entry[2]].id)
        if kind == PURCHASE_RESERVED:
            player = self.session.players[self.session.current_player_index]
            return TurnAction.purchase(player.reserved_cards[entry[1]].id)
        if kind == RESERVE_MARKET:
            return TurnAction.reserve(card_id=self.session.market[entry[1]].visible[entry[2]].id)
        if kind == RESERVE_DECK:
            return TurnAction.reserve(tier=entry[1])
        return entry[1]

    # --- AEC API ---

    def observe(self, agent: str) -> np.ndarray:
        player_index = self.possible_agents.index(agent)
        if agent == self.agent_selection:
            self.infos[agent]["action_mask"] = self.get_action_mask()
        else:
            self.infos[agent]["action_mask"] = np.zeros(TOTAL_ACTIONS, dtype=np.int8)
        return self.get_obs_vector(player_index)

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None) -> None:
        self._rng = np.random.default_rng(seed)
        setup = SetupOptions(
            player_count=self.num_players,
            player_names=self.possible_agents,
            ai_flags=[False] * self.num_players,
        )
        self.session = create_session(setup, self._rng)
        self.agents = self.possible_agents[:]
        self.agent_selection = self.agents[self.session.current_player_index]
        self.rewards = {agent: 0.0 for agent in self.agents}
        self._cumulative_rewards = {agent: 0.0 for agent in self.agents}
        self.terminations = {agent: False for agent in self.agents}
        self.truncations = {agent: False for agent in self.agents}
        self.infos = {agent: {} for agent in self.agents}
        self.infos[self.agent_selection]["action_mask"] = self.get_action_mask()

    def step(self, action: Optional[int]) -> None:
        if self.terminations[self.agent_selection] or self.truncations[self.agent_selection]:
            self._was_dead_step(action)
            return

        current_agent = self.agent_selection
        self.rewards = {agent: 0.0 for agent in self.agents}
        mask = self.get_action_mask()

        if action is None or not (0 <= action < TOTAL_ACTIONS) or mask[action] == 0:
            logger.warning("Agent %s submitted an invalid action (%s)", current_agent, action)
            self.truncations = {agent: True for agent in self.agents}
            self.infos[current_agent]["error"] = "Invalid action submitted."
            return

        resolved = self.resolve_action(action)
        try:
            if isinstance(resolved, GemTokens):
                discard_tokens(self.session, resolved)
            else:
                execute_turn(self.session, resolved)
        except SplendorError as e:
            logger.error("Masked action %r was rejected: %s", resolved, e)
            self.truncations = {agent: True for agent in self.agents}
            self.infos[current_agent]["error"] = str(e)
            return

        if is_game_over(self.session):
            self.terminations = {agent: True for agent in self.agents}
            winner = get_winner_index(self.session)
            for i, agent in enumerate(self.agents):
                self.rewards[agent] = 1.0 if i == winner else -1.0
                self.infos[agent] = {"game_winner": winner}
        else:
            self.agent_selection = self.agents[self.session.current_player_index]
            next_mask = self.get_action_mask()
            self.infos[self.agent_selection]["action_mask"] = next_mask
            if next_mask.sum() == 0:
                logger.warning("Agent %s has no legal action; truncating the game", self.agent_selection)
                self.truncations = {agent: True for agent in self.agents}
                self.infos = {agent: {"game_winner": -1, "deadlock": True} for agent in self.agents}

        for agent in self.agents:
            self._cumulative_rewards[agent] += self.rewards[agent]

        if self.render_mode == "human":
            self.render()

    def render(self) -> None:
        if self.render_mode == "human" and self.session is not None:
            print("\n" + "=" * 60)
            print(f"--- Current agent: {self.agent_selection} ---")
            print(self.session)
            for player in self.session.players:
                print(player)
            print("=" * 60)

    def action_space(self, agent: str) -> Discrete:
        return self.action_spaces[agent]

    def observation_space(self, agent: str) -> Box:
        return self.observation_spaces[agent]

    def close(self) -> None:
        pass
