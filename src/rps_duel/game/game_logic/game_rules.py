"""
游戏规则实现
Game Rules Implementation
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from .gesture import Gesture, BEATS
from ..state_machine.match_state import Side
from ...utils.logger import setup_logger

logger = setup_logger("RPS.GameRules")


class OutcomeKind(Enum):
    """回合结果类型枚举"""
    WIN = "win"                        # 一方手势获胜
    DRAW = "draw"                      # 平局
    FORFEIT = "forfeit"                # 一方未出手，另一方判胜
    DOUBLE_FORFEIT = "double_forfeit"  # 双方均未出手，记为平局


@dataclass(frozen=True)
class RoundVerdict:
    """回合判定结果"""
    kind: OutcomeKind
    winner: Optional[Side] = None
    
    @property
    def is_draw(self) -> bool:
        return self.winner is None


class GameRules:
    """游戏规则类"""
    
    # 胜负规则：key胜value
    WIN_RULES = BEATS
    
    @staticmethod
    def judge(gesture_a: Optional[Gesture], gesture_b: Optional[Gesture]) -> RoundVerdict:
        """
        判断回合结果
        
        Args:
            gesture_a: A方手势，未出手为 None
            gesture_b: B方手势，未出手为 None
        
        Returns:
            RoundVerdict: 判定结果
        """
        if gesture_a is None and gesture_b is None:
            logger.debug("双方均未出手")
            return RoundVerdict(OutcomeKind.DOUBLE_FORFEIT)
        
        if gesture_a is None:
            logger.debug(f"A方未出手，B方获胜: {gesture_b}")
            return RoundVerdict(OutcomeKind.FORFEIT, Side.B)
        
        if gesture_b is None:
            logger.debug(f"B方未出手，A方获胜: {gesture_a}")
            return RoundVerdict(OutcomeKind.FORFEIT, Side.A)
        
        if gesture_a == gesture_b:
            logger.debug(f"平局: {gesture_a}")
            return RoundVerdict(OutcomeKind.DRAW)
        
        if GameRules.WIN_RULES[gesture_a] == gesture_b:
            logger.debug(f"A方获胜: {gesture_a} 胜 {gesture_b}")
            return RoundVerdict(OutcomeKind.WIN, Side.A)
        
        logger.debug(f"B方获胜: {gesture_b} 胜 {gesture_a}")
        return RoundVerdict(OutcomeKind.WIN, Side.B)
    
    @staticmethod
    def get_winning_gesture(gesture: Gesture) -> Gesture:
        """
        获取能战胜指定手势的手势
        
        Args:
            gesture: 目标手势
        
        Returns:
            Gesture: 能战胜目标的手势
        """
        for winner, loser in GameRules.WIN_RULES.items():
            if loser == gesture:
                return winner
        raise ValueError(f"未知手势: {gesture!r}")
    
    @staticmethod
    def get_losing_gesture(gesture: Gesture) -> Gesture:
        """获取会被指定手势战胜的手势"""
        return GameRules.WIN_RULES[gesture]
