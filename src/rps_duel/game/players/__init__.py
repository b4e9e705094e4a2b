"""
玩家与电脑决策模块
Players and Computer Decision Module
"""
from .player import Player, PlayerKind
from .decision_engine import (
    ComputerDecisionEngine,
    clamp_difficulty,
    describe_difficulty,
    EXPLORATION_RATE
)

__all__ = [
    'Player',
    'PlayerKind',
    'ComputerDecisionEngine',
    'clamp_difficulty',
    'describe_difficulty',
    'EXPLORATION_RATE'
]
