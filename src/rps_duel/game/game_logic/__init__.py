"""
游戏逻辑模块
Game Logic Module
"""
from .gesture import Gesture, ALL_GESTURES
from .game_rules import GameRules, OutcomeKind, RoundVerdict
from .match_history import MatchHistory, RoundRecord

__all__ = [
    'Gesture',
    'ALL_GESTURES',
    'GameRules',
    'OutcomeKind',
    'RoundVerdict',
    'MatchHistory',
    'RoundRecord'
]
