"""
回合状态机模块
Round State Machine Module
"""
from .match_state import GameMode, Side, RoundPhase, MatchState, parse_side
from .round_state_machine import RoundStateMachine, DEFAULT_COUNTDOWN_SECONDS

__all__ = [
    'GameMode',
    'Side',
    'RoundPhase',
    'MatchState',
    'parse_side',
    'RoundStateMachine',
    'DEFAULT_COUNTDOWN_SECONDS'
]
