"""
对局状态数据
Match State Data
"""
from dataclasses import dataclass, asdict
from enum import Enum, auto
from typing import Optional


class GameMode(Enum):
    """对局模式枚举"""
    PLAYER_VS_COMPUTER = "pvc"   # 人机对战
    PLAYER_VS_PLAYER = "pvp"     # 双人对战
    
    def __str__(self):
        return self.short_code
    
    @property
    def display_name(self) -> str:
        return _MODE_DISPLAY_NAMES[self]
    
    @property
    def short_code(self) -> str:
        return "PvC" if self is GameMode.PLAYER_VS_COMPUTER else "PvP"
    
    @classmethod
    def from_string(cls, value) -> Optional["GameMode"]:
        """
        从字符串创建对局模式（接受 pvc / PvC / PLAYER_VS_COMPUTER 等写法）
        
        Args:
            value: 模式字符串
        
        Returns:
            Optional[GameMode]: 对局模式，无法识别返回 None
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        for mode in cls:
            if key in (mode.value, mode.name.lower()):
                return mode
        return None


_MODE_DISPLAY_NAMES = {
    GameMode.PLAYER_VS_COMPUTER: "Player vs Computer",
    GameMode.PLAYER_VS_PLAYER: "Player vs Player",
}


class Side(Enum):
    """对局双方"""
    A = "a"
    B = "b"
    
    def __str__(self):
        return self.name
    
    @property
    def opponent(self) -> "Side":
        return Side.B if self is Side.A else Side.A


class RoundPhase(Enum):
    """回合阶段枚举"""
    IDLE = auto()               # 空闲，尚未开始回合
    COUNTDOWN_ACTIVE = auto()   # 倒计时中，接受出手
    RESOLVED = auto()           # 回合已结算
    MATCH_FINISHED = auto()     # 对局结束
    
    def __str__(self):
        return self.name


@dataclass
class MatchState:
    """对局状态，仅由 GameEngine 通过 RoundStateMachine 修改"""
    mode: GameMode
    max_rounds: int
    current_round: int = 0
    wins_a: int = 0
    wins_b: int = 0
    draws: int = 0
    phase: RoundPhase = RoundPhase.IDLE
    deadline: Optional[float] = None
    
    def wins(self, side: Side) -> int:
        """获取指定一方的胜场数"""
        return self.wins_a if side is Side.A else self.wins_b
    
    def to_dict(self) -> dict:
        """转换为字典"""
        data = asdict(self)
        data['mode'] = self.mode.value
        data['phase'] = self.phase.name
        return data


def parse_side(value) -> Optional[Side]:
    """
    解析对局一方（接受 Side、"a"/"b"、1/2）
    
    Args:
        value: 待解析的值
    
    Returns:
        Optional[Side]: 对局一方，无法识别返回 None
    """
    if isinstance(value, Side):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        for side in Side:
            if side.value == key:
                return side
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return {1: Side.A, 2: Side.B}.get(value)
    return None
