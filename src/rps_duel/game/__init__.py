"""
游戏核心模块
Game Core Module
"""
from .game_engine import GameEngine, PlayerSnapshot, DEFAULT_KEY_BINDINGS
from .events import (
    GameEvent,
    MatchInitialized,
    RoundStarted,
    GestureSubmitted,
    RoundResolved,
    MatchEnded,
    EventDispatcher
)
from .input_guard import InputGuard
from .game_logic import Gesture, GameRules, OutcomeKind, RoundVerdict, MatchHistory, RoundRecord
from .players import Player, PlayerKind, ComputerDecisionEngine
from .state_machine import GameMode, Side, RoundPhase, MatchState, RoundStateMachine

__all__ = [
    'GameEngine',
    'PlayerSnapshot',
    'DEFAULT_KEY_BINDINGS',
    'GameEvent',
    'MatchInitialized',
    'RoundStarted',
    'GestureSubmitted',
    'RoundResolved',
    'MatchEnded',
    'EventDispatcher',
    'InputGuard',
    'Gesture',
    'GameRules',
    'OutcomeKind',
    'RoundVerdict',
    'MatchHistory',
    'RoundRecord',
    'Player',
    'PlayerKind',
    'ComputerDecisionEngine',
    'GameMode',
    'Side',
    'RoundPhase',
    'MatchState',
    'RoundStateMachine'
]
