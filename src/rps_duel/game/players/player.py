"""
玩家
Player

交互玩家（由外部输入出手）与自主玩家（由决策引擎出手）共用一个类，
通过 kind 字段区分，由 GameEngine 显式检查。
"""
from enum import Enum
from typing import Dict, List, Optional
from .decision_engine import ComputerDecisionEngine, clamp_difficulty, describe_difficulty
from ..game_logic.gesture import Gesture, ALL_GESTURES
from ...utils.exceptions import ConfigurationException


class PlayerKind(Enum):
    """玩家类型"""
    INTERACTIVE = "interactive"   # 交互玩家（键盘/按钮）
    AUTONOMOUS = "autonomous"     # 自主玩家（电脑）


class Player:
    """玩家类，保存单回合的出手状态"""
    
    def __init__(self, name: str, kind: PlayerKind,
                 key_map: Optional[Dict[str, Gesture]] = None,
                 difficulty: int = 0):
        """
        初始化玩家，通常使用 interactive() / autonomous() 创建
        
        Args:
            name: 显示名称
            kind: 玩家类型
            key_map: 按键到手势的映射（仅交互玩家）
            difficulty: 难度 0-2（仅自主玩家，超出范围时截断）
        """
        self.name = name
        self.kind = kind
        self.key_map: Dict[str, Gesture] = dict(key_map or {})
        self.difficulty = clamp_difficulty(difficulty) if kind is PlayerKind.AUTONOMOUS else 0
        self.opponent_history: List[Gesture] = []
        self.current_gesture: Optional[Gesture] = None
        self.has_submitted = False
    
    @classmethod
    def interactive(cls, name: str, rock_key: str, paper_key: str,
                    scissors_key: str) -> "Player":
        """
        创建交互玩家
        
        Args:
            name: 显示名称
            rock_key: 石头按键
            paper_key: 布按键
            scissors_key: 剪刀按键
        
        Returns:
            Player: 交互玩家
        
        Raises:
            ConfigurationException: 按键不是三个互不相同的单字符
        """
        keys = [rock_key, paper_key, scissors_key]
        if not all(isinstance(key, str) and len(key) == 1 for key in keys):
            raise ConfigurationException(f"按键必须是单个字符: {keys}", config_key="key_bindings")
        keys = [key.lower() for key in keys]
        if len(set(keys)) != len(keys):
            raise ConfigurationException(f"按键必须互不相同: {keys}", config_key="key_bindings")
        
        return cls(name, PlayerKind.INTERACTIVE, key_map=dict(zip(keys, ALL_GESTURES)))
    
    @classmethod
    def autonomous(cls, name: str, difficulty: int) -> "Player":
        """创建自主（电脑）玩家"""
        return cls(name, PlayerKind.AUTONOMOUS, difficulty=difficulty)
    
    @property
    def is_interactive(self) -> bool:
        return self.kind is PlayerKind.INTERACTIVE
    
    @property
    def is_autonomous(self) -> bool:
        return self.kind is PlayerKind.AUTONOMOUS
    
    def submit(self, gesture: Gesture) -> bool:
        """
        提交本回合手势
        
        Args:
            gesture: 手势
        
        Returns:
            bool: 是否接受；本回合已提交过则拒绝，已存手势不变
        """
        if self.has_submitted:
            return False
        self.current_gesture = gesture
        self.has_submitted = True
        return True
    
    def map_input(self, symbol) -> Optional[Gesture]:
        """
        查找按键对应的手势（不区分大小写）
        
        Args:
            symbol: 输入按键
        
        Returns:
            Optional[Gesture]: 对应手势；未映射或自主玩家返回 None
        """
        if not self.is_interactive or not isinstance(symbol, str):
            return None
        return self.key_map.get(symbol.lower())
    
    def make_choice(self, decision_engine: ComputerDecisionEngine) -> Optional[Gesture]:
        """
        自行决定手势
        
        交互玩家只通过 submit 出手，这里始终返回 None。
        """
        if not self.is_autonomous:
            return None
        return decision_engine.choose(self.difficulty, self.opponent_history)
    
    def record_opponent_gesture(self, gesture: Optional[Gesture]):
        """把对手本回合的手势加入历史（仅自主玩家）"""
        if self.is_autonomous and gesture is not None:
            self.opponent_history.append(gesture)
    
    def reset_for_round(self):
        """新回合开始时清除手势和提交标记"""
        self.current_gesture = None
        self.has_submitted = False
    
    def reset_for_match(self):
        """新对局开始时额外清除对手历史"""
        self.reset_for_round()
        self.opponent_history.clear()
    
    def key_bindings_description(self) -> str:
        """按键说明，例如 "Alice: A=Rock, S=Paper, D=Scissors" """
        if not self.is_interactive:
            return f"{self.name}: {self.difficulty_description()}"
        bindings = ", ".join(f"{key.upper()}={gesture.display_name}"
                             for key, gesture in self.key_map.items())
        return f"{self.name}: {bindings}"
    
    def difficulty_description(self) -> str:
        if not self.is_autonomous:
            return "Human"
        return describe_difficulty(self.difficulty)
    
    def __repr__(self):
        return (f"Player(name={self.name!r}, kind={self.kind.value}, "
                f"submitted={self.has_submitted})")
