"""
对局事件与监听器
Match Events and Listeners

GameEngine 按固定顺序发出五种通知：
    MatchInitialized -> RoundStarted -> GestureSubmitted* -> RoundResolved
    -> (RoundStarted ... | MatchEnded)
"""
from dataclasses import dataclass
from typing import Callable, ClassVar, List, Optional
from .game_logic.gesture import Gesture
from .state_machine.match_state import GameMode, MatchState, Side
from ..utils.error_handler import global_error_handler
from ..utils.exceptions import ListenerException
from ..utils.logger import setup_logger

logger = setup_logger("RPS.Events")


@dataclass(frozen=True)
class GameEvent:
    """事件基类"""
    kind: ClassVar[str] = "event"


@dataclass(frozen=True)
class MatchInitialized(GameEvent):
    kind: ClassVar[str] = "match_initialized"
    mode: GameMode
    max_rounds: int


@dataclass(frozen=True)
class RoundStarted(GameEvent):
    kind: ClassVar[str] = "round_started"
    round_index: int


@dataclass(frozen=True)
class GestureSubmitted(GameEvent):
    kind: ClassVar[str] = "gesture_submitted"
    side: Side
    gesture: Gesture


@dataclass(frozen=True)
class RoundResolved(GameEvent):
    kind: ClassVar[str] = "round_result"
    gesture_a: Optional[Gesture]
    gesture_b: Optional[Gesture]
    winner: Optional[Side]
    reason: str


@dataclass(frozen=True)
class MatchEnded(GameEvent):
    kind: ClassVar[str] = "match_ended"
    winner: Optional[Side]
    counters: MatchState


Listener = Callable[[GameEvent], None]


class EventDispatcher:
    """按注册顺序把事件逐个交给监听器"""
    
    def __init__(self):
        self._listeners: List[Listener] = []
    
    def add_listener(self, listener: Listener):
        """
        注册监听器（重复注册会被忽略）
        
        Args:
            listener: 回调函数，参数为事件对象
        """
        if listener not in self._listeners:
            self._listeners.append(listener)
            logger.debug(f"注册监听器: {listener!r}")
    
    def remove_listener(self, listener: Listener) -> bool:
        """移除监听器，返回是否存在"""
        if listener in self._listeners:
            self._listeners.remove(listener)
            return True
        return False
    
    def emit(self, event: GameEvent):
        """
        分发事件
        
        监听器抛出的异常只记录日志，不影响其它监听器和引擎状态。
        
        Args:
            event: 事件对象
        """
        logger.debug(f"分发事件: {event}")
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                global_error_handler.handle(
                    ListenerException(f"{type(e).__name__}: {e}", event_kind=event.kind),
                    "事件分发"
                )
    
    def __len__(self) -> int:
        return len(self._listeners)
