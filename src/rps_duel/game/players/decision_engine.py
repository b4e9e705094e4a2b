"""
电脑出手决策引擎
Computer Decision Engine

按难度分三档：
    0 - 完全随机
    1 - 统计对手最常出的手势并克制它
    2 - 近期加权统计 + 循环序列预测，带 20% 随机探索
"""
from typing import Optional, Sequence
import numpy as np
from ..game_logic.gesture import Gesture, ALL_GESTURES
from ..game_logic.game_rules import GameRules
from ...utils.logger import setup_logger

logger = setup_logger("RPS.DecisionEngine")

MIN_DIFFICULTY = 0
MAX_DIFFICULTY = 2
DEFAULT_DIFFICULTY = 1

# 随机探索概率
EXPLORATION_RATE = 0.2
# 第 i 条历史（从最早的 0 开始）的权重为 RECENCY_BASE ** i
RECENCY_BASE = 1.2
# 序列预测命中时追加的权重比例（乘以总权重）
SEQUENCE_BONUS = 0.3
# 高级策略所需的最少历史条数
MIN_ADVANCED_HISTORY = 3

DIFFICULTY_DESCRIPTIONS = {
    0: "Easy (Random)",
    1: "Medium (Basic Pattern)",
    2: "Hard (Advanced Pattern)",
}

_GESTURE_INDEX = {gesture: index for index, gesture in enumerate(ALL_GESTURES)}


def clamp_difficulty(difficulty) -> int:
    """将难度限制在 0..2 之间；无法转换为整数时使用默认难度"""
    try:
        value = int(difficulty)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"难度无效: {difficulty!r}，使用默认难度 {DEFAULT_DIFFICULTY}")
        return DEFAULT_DIFFICULTY
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, value))


def describe_difficulty(difficulty: int) -> str:
    """获取难度描述"""
    return DIFFICULTY_DESCRIPTIONS.get(difficulty, "Unknown")


class ComputerDecisionEngine:
    """电脑决策引擎类，是 (难度, 对手历史) 加随机数源的纯函数"""
    
    def __init__(self, rng=None):
        """
        初始化决策引擎
        
        Args:
            rng: 随机数源，需提供 random() 与 integers(low, high)，
                 默认使用 numpy.random.default_rng()
        """
        self.rng = rng if rng is not None else np.random.default_rng()
    
    @classmethod
    def seeded(cls, seed: Optional[int]) -> "ComputerDecisionEngine":
        """创建使用固定种子的决策引擎"""
        return cls(np.random.default_rng(seed))
    
    def choose(self, difficulty: int, history: Sequence[Gesture]) -> Gesture:
        """
        根据难度和对手历史选择下一手
        
        Args:
            difficulty: 难度（超出范围时截断到 0..2）
            history: 对手历史手势，从最早到最近
        
        Returns:
            Gesture: 选择的手势
        """
        tier = clamp_difficulty(difficulty)
        if tier == 0:
            choice = self._random_choice()
        elif tier == 1:
            choice = self._basic_pattern_choice(history)
        else:
            choice = self._advanced_pattern_choice(history)
        
        logger.debug(f"难度 {tier}，历史 {len(history)} 条，选择: {choice}")
        return choice
    
    def _random_choice(self) -> Gesture:
        return Gesture.uniform_random(self.rng)
    
    def _basic_pattern_choice(self, history: Sequence[Gesture]) -> Gesture:
        """克制对手出现次数最多的手势"""
        if not history:
            return self._random_choice()
        
        counts = np.bincount(_indices(history), minlength=len(ALL_GESTURES))
        most_frequent = _argmax_gesture(counts)
        return GameRules.get_winning_gesture(most_frequent)
    
    def _advanced_pattern_choice(self, history: Sequence[Gesture]) -> Gesture:
        """克制近期加权及序列预测得分最高的手势"""
        if len(history) < MIN_ADVANCED_HISTORY:
            return self._basic_pattern_choice(history)
        
        weights = RECENCY_BASE ** np.arange(len(history), dtype=float)
        scores = np.bincount(_indices(history), weights=weights,
                             minlength=len(ALL_GESTURES))
        total_weight = float(weights.sum())
        
        second_last, last = history[-2], history[-1]
        if last != second_last:
            predicted = self.predict_next_in_sequence(second_last, last)
            if predicted is not None:
                scores[_GESTURE_INDEX[predicted]] += SEQUENCE_BONUS * total_weight
        
        most_likely = _argmax_gesture(scores)
        
        if self.rng.random() < EXPLORATION_RATE:
            return self._random_choice()
        
        return GameRules.get_winning_gesture(most_likely)
    
    @staticmethod
    def predict_next_in_sequence(first: Gesture, second: Gesture) -> Optional[Gesture]:
        """
        预测循环序列的下一手
        
        正向循环: Rock -> Paper -> Scissors -> Rock
        反向循环: Rock -> Scissors -> Paper -> Rock
        
        Args:
            first: 倒数第二手
            second: 最后一手
        
        Returns:
            Optional[Gesture]: 预测的下一手，不构成循环时返回 None
        """
        # 正向循环的下一手恰好是克制当前手势的手势
        if GameRules.get_winning_gesture(first) == second:
            return GameRules.get_winning_gesture(second)
        if GameRules.get_losing_gesture(first) == second:
            return GameRules.get_losing_gesture(second)
        return None


def _indices(history: Sequence[Gesture]) -> np.ndarray:
    return np.fromiter((_GESTURE_INDEX[g] for g in history), dtype=np.intp, count=len(history))


def _argmax_gesture(scores: np.ndarray) -> Gesture:
    # np.argmax 取第一个最大值，平局时按 Rock > Paper > Scissors
    return ALL_GESTURES[int(np.argmax(scores))]
