from .random_bot import RandomBot
from .greedy_bot import GreedyBot
from .ai_player import AiPlayer, STRATEGIES, make_strategy
from .match import GameRecord, MatchStalledError, play_game

__all__ = [
    'RandomBot',
    'GreedyBot',
    'AiPlayer',
    'STRATEGIES',
    'make_strategy',
    'GameRecord',
    'MatchStalledError',
    'play_game',
]
