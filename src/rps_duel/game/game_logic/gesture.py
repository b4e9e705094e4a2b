"""
手势枚举类型
Gesture Enumeration
"""
from enum import Enum
from typing import Optional


class Gesture(Enum):
    """手势类型枚举"""
    ROCK = "rock"          # 石头
    PAPER = "paper"        # 布
    SCISSORS = "scissors"  # 剪刀
    
    def __str__(self):
        return self.value
    
    @property
    def display_name(self) -> str:
        """显示名称（Rock / Paper / Scissors）"""
        return self.value.capitalize()
    
    @property
    def short_code(self) -> str:
        """单字母代码（R / P / S）"""
        return self.value[0].upper()
    
    def beats(self, other: Optional["Gesture"]) -> bool:
        """
        判断本手势是否战胜对方手势
        
        Args:
            other: 对方手势
        
        Returns:
            bool: 是否获胜；相同手势或对方为空时返回 False
        """
        return BEATS.get(self) is other
    
    @classmethod
    def parse(cls, code) -> Optional["Gesture"]:
        """
        从单字母代码解析手势（不区分大小写）
        
        Args:
            code: 单字母代码（R, P, S）
        
        Returns:
            Optional[Gesture]: 手势，无法识别返回 None
        """
        if not isinstance(code, str) or len(code) != 1:
            return None
        return _BY_SHORT_CODE.get(code.upper())
    
    @classmethod
    def from_string(cls, value) -> Optional["Gesture"]:
        """
        从字符串创建手势枚举
        
        Args:
            value: 手势字符串（rock, paper, scissors）
        
        Returns:
            Optional[Gesture]: 手势枚举值，无法识别返回 None
        """
        if not isinstance(value, str):
            return None
        value_lower = value.strip().lower()
        for gesture in cls:
            if gesture.value == value_lower:
                return gesture
        return None
    
    @classmethod
    def uniform_random(cls, rng) -> "Gesture":
        """
        等概率随机选择手势
        
        Args:
            rng: 随机数源（numpy.random.Generator 接口）
        
        Returns:
            Gesture: 随机手势
        """
        return ALL_GESTURES[int(rng.integers(0, len(ALL_GESTURES)))]


# 固定顺序，同时也是平局时的优先顺序
ALL_GESTURES = (Gesture.ROCK, Gesture.PAPER, Gesture.SCISSORS)

# key 胜 value
BEATS = {
    Gesture.ROCK: Gesture.SCISSORS,
    Gesture.SCISSORS: Gesture.PAPER,
    Gesture.PAPER: Gesture.ROCK,
}

_BY_SHORT_CODE = {gesture.short_code: gesture for gesture in ALL_GESTURES}
