"""
按键防作弊
Key Input Guard

在按键交给 GameEngine 之前过滤按住不放产生的重复按键，
以及单位时间内过多的按键。
"""
import time
from typing import Callable, Optional, Set
from ..utils.logger import setup_logger

logger = setup_logger("RPS.InputGuard")

MAX_KEYS_PER_WINDOW = 10
KEY_PRESS_WINDOW_SECONDS = 1.0


class InputGuard:
    """按键过滤器"""
    
    def __init__(self,
                 clock: Optional[Callable[[], float]] = None,
                 max_keys_per_window: int = MAX_KEYS_PER_WINDOW,
                 window_seconds: float = KEY_PRESS_WINDOW_SECONDS,
                 on_cheat_detected: Optional[Callable[[str], None]] = None):
        """
        初始化按键过滤器
        
        Args:
            clock: 时钟函数，默认 time.monotonic
            max_keys_per_window: 时间窗口内允许的最多按键数
            window_seconds: 时间窗口长度（秒）
            on_cheat_detected: 检测到异常按键时的回调，参数为原因
        """
        self.clock = clock or time.monotonic
        self.max_keys_per_window = max_keys_per_window
        self.window_seconds = window_seconds
        self.on_cheat_detected = on_cheat_detected
        self._pressed: Set[str] = set()
        self._window_start: Optional[float] = None
        self._press_count = 0
    
    def key_pressed(self, symbol: str) -> bool:
        """
        处理按键按下
        
        Args:
            symbol: 按键
        
        Returns:
            bool: 是否放行给引擎
        """
        if symbol in self._pressed:
            return False
        self._pressed.add(symbol)
        
        now = self.clock()
        if self._window_start is None or now - self._window_start > self.window_seconds:
            self._press_count = 0
            self._window_start = now
        
        self._press_count += 1
        if self._press_count > self.max_keys_per_window:
            reason = "Excessive key presses detected"
            logger.warning(f"{reason}: {self._press_count} 次 / {self.window_seconds}s")
            if self.on_cheat_detected:
                self.on_cheat_detected(reason)
            return False
        
        return True
    
    def key_released(self, symbol: str):
        """处理按键松开"""
        self._pressed.discard(symbol)
    
    def reset(self):
        """重置过滤器状态"""
        self._pressed.clear()
        self._window_start = None
        self._press_count = 0
