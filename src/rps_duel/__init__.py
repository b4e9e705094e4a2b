"""
剪刀石头布对战引擎
Rock Paper Scissors Duel Engine
"""
from .game import (
    GameEngine,
    GameMode,
    Side,
    Gesture,
    ComputerDecisionEngine,
    MatchInitialized,
    RoundStarted,
    GestureSubmitted,
    RoundResolved,
    MatchEnded
)
from .config_manager import GameConfigManager, GameSettings

__version__ = "1.0.0"

__all__ = [
    'GameEngine',
    'GameMode',
    'Side',
    'Gesture',
    'ComputerDecisionEngine',
    'MatchInitialized',
    'RoundStarted',
    'GestureSubmitted',
    'RoundResolved',
    'MatchEnded',
    'GameConfigManager',
    'GameSettings',
    '__version__'
]
