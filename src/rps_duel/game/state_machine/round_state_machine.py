"""
回合状态机
Round State Machine
"""
from dataclasses import replace
from typing import Dict, List, Optional
from .match_state import GameMode, MatchState, RoundPhase, Side
from ...utils.logger import setup_logger

logger = setup_logger("RPS.RoundStateMachine")

# 倒计时时长（秒）
DEFAULT_COUNTDOWN_SECONDS = 3.0


class RoundStateMachine:
    """回合状态机类，维护回合序号、胜负计数、阶段和倒计时截止时间"""
    
    # 状态转换规则
    VALID_TRANSITIONS: Dict[RoundPhase, List[RoundPhase]] = {
        RoundPhase.IDLE: [RoundPhase.COUNTDOWN_ACTIVE, RoundPhase.MATCH_FINISHED],
        RoundPhase.COUNTDOWN_ACTIVE: [RoundPhase.RESOLVED],
        RoundPhase.RESOLVED: [RoundPhase.COUNTDOWN_ACTIVE, RoundPhase.MATCH_FINISHED],
        RoundPhase.MATCH_FINISHED: [],
    }
    
    def __init__(self, mode: GameMode, max_rounds: int,
                 countdown_seconds: float = DEFAULT_COUNTDOWN_SECONDS):
        """
        初始化状态机
        
        Args:
            mode: 对局模式
            max_rounds: 最大回合数，小于1时按1处理
            countdown_seconds: 每回合倒计时秒数
        """
        if max_rounds < 1:
            logger.warning(f"最大回合数无效: {max_rounds}，使用 1")
            max_rounds = 1
        
        self.countdown_seconds = float(countdown_seconds)
        self._state = MatchState(mode=mode, max_rounds=max_rounds)
        
        logger.info(f"回合状态机初始化，模式: {mode.display_name}, 最大回合数: {max_rounds}")
    
    @property
    def state(self) -> MatchState:
        """对局状态快照（副本）"""
        return replace(self._state)
    
    @property
    def phase(self) -> RoundPhase:
        return self._state.phase
    
    @property
    def current_round(self) -> int:
        return self._state.current_round
    
    @property
    def rounds_to_win(self) -> int:
        """赢下对局所需的胜场数（过半）"""
        return self._state.max_rounds // 2 + 1
    
    def _transition_to(self, new_phase: RoundPhase) -> bool:
        """
        转换到新阶段
        
        Args:
            new_phase: 新阶段
        
        Returns:
            bool: 转换是否成功
        """
        old_phase = self._state.phase
        if new_phase not in self.VALID_TRANSITIONS[old_phase]:
            logger.warning(f"无效的阶段转换: {old_phase} -> {new_phase}")
            return False
        
        self._state.phase = new_phase
        logger.debug(f"阶段转换: {old_phase} -> {new_phase}")
        return True
    
    def start_round(self, now: float) -> bool:
        """
        开始新回合
        
        Args:
            now: 当前时间（秒）
        
        Returns:
            bool: 是否开始了新回合；对局已结束时返回 False
        """
        if self.is_match_finished():
            logger.debug("对局已结束，忽略开始回合")
            return False
        
        if not self._transition_to(RoundPhase.COUNTDOWN_ACTIVE):
            return False
        
        self._state.current_round += 1
        self._state.deadline = now + self.countdown_seconds
        
        logger.info(f"第 {self._state.current_round} 回合开始，截止时间: {self._state.deadline:.3f}")
        return True
    
    def is_round_active(self) -> bool:
        """回合是否正在进行（倒计时阶段）"""
        return self._state.phase == RoundPhase.COUNTDOWN_ACTIVE
    
    def time_remaining(self, now: float) -> float:
        """
        获取剩余倒计时
        
        Args:
            now: 当前时间（秒）
        
        Returns:
            float: 剩余秒数；尚未设置截止时间时返回完整时长
        """
        if self._state.deadline is None:
            return self.countdown_seconds
        return max(0.0, self._state.deadline - now)
    
    def is_expired(self, now: float) -> bool:
        """倒计时是否已到"""
        return self.time_remaining(now) == 0
    
    def record_win(self, side: Side):
        """记录一方胜一局"""
        if side is Side.A:
            self._state.wins_a += 1
        else:
            self._state.wins_b += 1
    
    def record_draw(self):
        """记录平局"""
        self._state.draws += 1
    
    def resolve_round(self) -> bool:
        """结束当前回合的倒计时阶段"""
        return self._transition_to(RoundPhase.RESOLVED)
    
    def is_match_finished(self) -> bool:
        """
        检查对局是否结束：任一方胜场过半，或已达到最大回合数
        
        Returns:
            bool: 是否结束
        """
        state = self._state
        if state.phase == RoundPhase.MATCH_FINISHED:
            return True
        return (state.wins_a >= self.rounds_to_win
                or state.wins_b >= self.rounds_to_win
                or state.current_round >= state.max_rounds)
    
    def finish(self) -> bool:
        """进入对局结束阶段"""
        return self._transition_to(RoundPhase.MATCH_FINISHED)
    
    def winner(self) -> Optional[Side]:
        """
        获取对局胜者
        
        Returns:
            Optional[Side]: 胜场严格更多的一方，相同时返回 None（平局）
        """
        if self._state.wins_a > self._state.wins_b:
            return Side.A
        if self._state.wins_b > self._state.wins_a:
            return Side.B
        return None
    
    def reset(self):
        """重置所有计数和回合序号（仅在两场对局之间使用）"""
        self._state = MatchState(mode=self._state.mode, max_rounds=self._state.max_rounds)
        logger.info("回合状态机已重置")
