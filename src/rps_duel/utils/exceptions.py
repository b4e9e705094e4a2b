"""
自定义异常类
Custom Exception Classes

对局过程中的错误（未映射按键、重复提交、回合未激活）不抛出异常，
以布尔/可选返回值报告给调用方；这里的异常只用于配置和宿主层。
"""
from typing import Optional


class GameException(Exception):
    """游戏逻辑异常"""
    def __init__(self, message: str, game_state: Optional[str] = None):
        super().__init__(message)
        self.game_state = game_state
        self.message = message


class ConfigurationException(Exception):
    """配置异常"""
    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message)
        self.config_key = config_key
        self.message = message


class ListenerException(GameException):
    """事件监听器回调异常"""
    def __init__(self, message: str, event_kind: Optional[str] = None):
        super().__init__(message)
        self.event_kind = event_kind
