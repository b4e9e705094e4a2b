"""
游戏引擎
Game Engine - 管理双方玩家和回合状态机，仲裁出手并结算回合

引擎是单线程、被动驱动的：内部没有定时器或线程。宿主需要周期性调用
check_round_completion()（或直接调用 force_end_round()）来处理倒计时到期。
所有操作都不抛异常，无效调用返回 False 或什么都不做。
"""
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple
from .events import (
    EventDispatcher, Listener, MatchInitialized, RoundStarted,
    GestureSubmitted, RoundResolved, MatchEnded
)
from .game_logic import Gesture, GameRules, OutcomeKind, RoundVerdict, MatchHistory, RoundRecord
from .players import Player, PlayerKind, ComputerDecisionEngine
from .state_machine import (
    GameMode, MatchState, RoundPhase, RoundStateMachine, Side,
    DEFAULT_COUNTDOWN_SECONDS, parse_side
)
from ..utils.exceptions import ConfigurationException
from ..utils.logger import setup_logger

logger = setup_logger("RPS.GameEngine")

# 默认按键：人机模式A方 R/P/S，双人模式A方 A/S/D、B方 J/K/L
DEFAULT_KEY_BINDINGS: Dict[str, Tuple[str, str, str]] = {
    'pvc_a': ('r', 'p', 's'),
    'pvp_a': ('a', 's', 'd'),
    'pvp_b': ('j', 'k', 'l'),
}


@dataclass(frozen=True)
class PlayerSnapshot:
    """玩家只读快照；倒计时期间不暴露手势"""
    name: str
    kind: PlayerKind
    has_submitted: bool
    gesture: Optional[Gesture]
    description: str
    opponent_history: Tuple[Gesture, ...] = ()


class GameEngine:
    """游戏引擎类"""
    
    def __init__(self,
                 clock: Optional[Callable[[], float]] = None,
                 decision_engine: Optional[ComputerDecisionEngine] = None,
                 countdown_seconds: float = DEFAULT_COUNTDOWN_SECONDS,
                 key_bindings: Optional[Dict[str, Tuple[str, str, str]]] = None):
        """
        初始化游戏引擎
        
        Args:
            clock: 时钟函数（秒），默认 time.monotonic
            decision_engine: 电脑决策引擎，默认使用未固定种子的随机数源
            countdown_seconds: 每回合倒计时秒数
            key_bindings: 覆盖默认按键（键为 pvc_a / pvp_a / pvp_b）
        """
        self.clock = clock or time.monotonic
        self.decision_engine = decision_engine or ComputerDecisionEngine()
        self.countdown_seconds = countdown_seconds
        self.key_bindings = dict(DEFAULT_KEY_BINDINGS)
        self.key_bindings.update(key_bindings or {})
        
        self._dispatcher = EventDispatcher()
        self._state_machine: Optional[RoundStateMachine] = None
        self._players: Dict[Side, Player] = {}
        self._history = MatchHistory()
        
        logger.info("游戏引擎初始化完成")
    
    # ------------------------------------------------------------------
    # 监听器
    # ------------------------------------------------------------------
    
    def add_listener(self, listener: Listener):
        """注册事件监听器"""
        self._dispatcher.add_listener(listener)
    
    def remove_listener(self, listener: Listener) -> bool:
        """移除事件监听器"""
        return self._dispatcher.remove_listener(listener)
    
    # ------------------------------------------------------------------
    # 对局流程
    # ------------------------------------------------------------------
    
    def initialize(self, mode, max_rounds: int, name_a: str, name_b: str,
                   computer_difficulty: int = 1) -> bool:
        """
        初始化新对局
        
        Args:
            mode: 对局模式（GameMode 或 "pvc" / "pvp"）
            max_rounds: 最大回合数，小于1时按1处理
            name_a: A方名称
            name_b: B方名称（人机模式下为电脑）
            computer_difficulty: 电脑难度 0-2，超出范围时截断
        
        Returns:
            bool: 是否初始化成功；模式或按键无效时返回 False 且不改变现有对局
        """
        game_mode = GameMode.from_string(mode)
        if game_mode is None:
            logger.warning(f"未知对局模式: {mode!r}")
            return False
        
        if isinstance(max_rounds, bool) or not isinstance(max_rounds, int):
            logger.warning(f"最大回合数必须为整数: {max_rounds!r}")
            return False
        
        try:
            if game_mode is GameMode.PLAYER_VS_COMPUTER:
                players = {
                    Side.A: Player.interactive(name_a or "Player", *self.key_bindings['pvc_a']),
                    Side.B: Player.autonomous(name_b or "Computer", computer_difficulty),
                }
            else:
                players = {
                    Side.A: Player.interactive(name_a or "Player 1", *self.key_bindings['pvp_a']),
                    Side.B: Player.interactive(name_b or "Player 2", *self.key_bindings['pvp_b']),
                }
        except (ConfigurationException, TypeError) as e:
            logger.warning(f"按键配置无效: {e}")
            return False
        
        if game_mode is GameMode.PLAYER_VS_PLAYER:
            shared = set(players[Side.A].key_map) & set(players[Side.B].key_map)
            if shared:
                logger.warning(f"双方按键重复: {sorted(shared)}")
        
        self._players = players
        self._state_machine = RoundStateMachine(game_mode, max_rounds, self.countdown_seconds)
        self._history.clear()
        
        logger.info(f"对局初始化: {game_mode.display_name}, "
                    f"{players[Side.A].name} vs {players[Side.B].name}")
        
        self._dispatcher.emit(MatchInitialized(game_mode, self._state_machine.state.max_rounds))
        return True
    
    def start_round(self) -> bool:
        """
        开始新回合
        
        电脑玩家在回合开始时立即决定手势并保存，结算时才公开。
        
        Returns:
            bool: 是否开始了新回合
        """
        if not self.is_initialized:
            logger.debug("对局未初始化，忽略开始回合")
            return False
        
        machine = self._state_machine
        if machine.is_match_finished():
            logger.debug("对局已结束，忽略开始回合")
            return False
        if machine.is_round_active():
            logger.debug("回合进行中，忽略开始回合")
            return False
        
        for player in self._players.values():
            player.reset_for_round()
        
        if not machine.start_round(self.clock()):
            return False
        
        for player in self._players.values():
            if player.is_autonomous:
                player.submit(player.make_choice(self.decision_engine))
        
        self._dispatcher.emit(RoundStarted(machine.current_round))
        return True
    
    def submit_input(self, side, symbol) -> bool:
        """
        提交指定一方的按键
        
        Args:
            side: 对局一方（Side 或 "a" / "b"）
            symbol: 输入按键
        
        Returns:
            bool: 是否接受；按键未映射、重复提交或回合未进行时返回 False
        """
        if not self._accepting_input():
            return False
        
        target = parse_side(side)
        player = self._players.get(target) if target else None
        if player is None or not player.is_interactive:
            logger.debug(f"无效的出手方: {side!r}")
            return False
        
        gesture = player.map_input(symbol)
        if gesture is None:
            logger.debug(f"{player.name} 的按键未映射: {symbol!r}")
            return False
        
        if not self._submit(target, gesture):
            return False
        
        self.check_round_completion()
        return True
    
    def process_key(self, symbol) -> bool:
        """
        处理一个原始按键，交给映射了该按键且尚未出手的交互玩家
        
        Args:
            symbol: 输入按键
        
        Returns:
            bool: 是否有玩家接受了该按键
        """
        if not self._accepting_input():
            return False
        
        processed = False
        for side, player in self._players.items():
            if not player.is_interactive or player.has_submitted:
                continue
            gesture = player.map_input(symbol)
            if gesture is not None and self._submit(side, gesture):
                processed = True
            # 监听器可能已在通知中结算了本回合
            if not self._state_machine.is_round_active():
                break
        
        self.check_round_completion()
        return processed
    
    def check_round_completion(self) -> bool:
        """
        检查回合是否完成（双方都已出手或倒计时到期），完成则结算
        
        重复调用是安全的：回合已结算时什么都不做。
        
        Returns:
            bool: 本次调用是否结算了回合
        """
        if not self.is_initialized or not self._state_machine.is_round_active():
            return False
        
        all_submitted = all(player.has_submitted for player in self._players.values())
        if all_submitted or self._state_machine.is_expired(self.clock()):
            self._end_round()
            return True
        return False
    
    def force_end_round(self) -> bool:
        """
        强制结算当前回合（外部判定超时）
        
        Returns:
            bool: 是否结算了回合；没有进行中的回合时返回 False
        """
        if not self.is_initialized or not self._state_machine.is_round_active():
            logger.debug("没有进行中的回合，忽略强制结算")
            return False
        
        logger.info(f"强制结算第 {self._state_machine.current_round} 回合")
        self._end_round()
        return True
    
    def reset_match(self) -> bool:
        """
        以相同模式和玩家重新开始对局，清除计数、回合记录和电脑的对手历史
        
        Returns:
            bool: 是否重置成功
        """
        if not self.is_initialized:
            return False
        
        self._state_machine.reset()
        for player in self._players.values():
            player.reset_for_match()
        self._history.clear()
        
        state = self._state_machine.state
        self._dispatcher.emit(MatchInitialized(state.mode, state.max_rounds))
        return True
    
    # ------------------------------------------------------------------
    # 内部实现
    # ------------------------------------------------------------------
    
    def _accepting_input(self) -> bool:
        """回合是否接受输入；倒计时已到时先结算回合"""
        if not self.is_initialized or not self._state_machine.is_round_active():
            logger.debug("回合未进行，忽略输入")
            return False
        
        if self._state_machine.is_expired(self.clock()):
            logger.debug("倒计时已到，忽略输入")
            self.check_round_completion()
            return False
        
        return True
    
    def _submit(self, side: Side, gesture: Gesture) -> bool:
        player = self._players[side]
        if not player.submit(gesture):
            logger.debug(f"{player.name} 本回合已出手，拒绝重复提交")
            return False
        
        logger.debug(f"{player.name} 出手")
        self._dispatcher.emit(GestureSubmitted(side, gesture))
        return True
    
    def _end_round(self):
        """结算当前回合"""
        machine = self._state_machine
        machine.resolve_round()
        
        player_a = self._players[Side.A]
        player_b = self._players[Side.B]
        gesture_a = player_a.current_gesture
        gesture_b = player_b.current_gesture
        
        verdict = GameRules.judge(gesture_a, gesture_b)
        if verdict.winner is not None:
            machine.record_win(verdict.winner)
        else:
            machine.record_draw()
        
        # 弃权方没有真实手势，不计入电脑的对手历史
        if verdict.kind in (OutcomeKind.WIN, OutcomeKind.DRAW):
            player_a.record_opponent_gesture(gesture_b)
            player_b.record_opponent_gesture(gesture_a)
        
        reason = self._describe_verdict(verdict, gesture_a, gesture_b)
        self._history.add(RoundRecord(
            round_number=machine.current_round,
            gesture_a=gesture_a,
            gesture_b=gesture_b,
            winner=verdict.winner,
            reason=reason
        ))
        
        logger.info(f"第 {machine.current_round} 回合: {reason} "
                    f"(比分 {machine.state.wins_a}:{machine.state.wins_b}, 平局 {machine.state.draws})")
        
        # 先判定是否结束，避免监听器在通知中开始下一回合后被误判
        finished = machine.is_match_finished()
        
        self._dispatcher.emit(RoundResolved(gesture_a, gesture_b, verdict.winner, reason))
        
        if finished:
            self._end_match()
    
    def _end_match(self):
        """结束对局并宣布胜者"""
        machine = self._state_machine
        machine.finish()
        winner = machine.winner()
        
        if winner is None:
            logger.info("对局结束: 平局")
        else:
            logger.info(f"对局结束: {self._players[winner].name} 获胜")
        
        self._dispatcher.emit(MatchEnded(winner, machine.state))
    
    def _describe_verdict(self, verdict: RoundVerdict, gesture_a: Optional[Gesture],
                          gesture_b: Optional[Gesture]) -> str:
        """生成回合结果说明"""
        if verdict.kind is OutcomeKind.DOUBLE_FORFEIT:
            return "Both players forfeited!"
        if verdict.kind is OutcomeKind.FORFEIT:
            return f"{self._players[verdict.winner.opponent].name} forfeited!"
        if verdict.kind is OutcomeKind.DRAW:
            return "It's a tie!"
        
        if verdict.winner is Side.A:
            winning, losing = gesture_a, gesture_b
        else:
            winning, losing = gesture_b, gesture_a
        return f"{winning.display_name} beats {losing.display_name}"
    
    # ------------------------------------------------------------------
    # 只读访问
    # ------------------------------------------------------------------
    
    @property
    def is_initialized(self) -> bool:
        return self._state_machine is not None
    
    @property
    def state(self) -> Optional[MatchState]:
        """对局状态快照"""
        if not self.is_initialized:
            return None
        return self._state_machine.state
    
    @property
    def is_match_finished(self) -> bool:
        return self.is_initialized and self._state_machine.phase == RoundPhase.MATCH_FINISHED
    
    @property
    def is_round_active(self) -> bool:
        return self.is_initialized and self._state_machine.is_round_active()
    
    @property
    def round_history(self):
        """本场对局的回合记录"""
        return self._history.records
    
    def winner(self) -> Optional[Side]:
        """当前领先的一方，平局或未初始化返回 None"""
        if not self.is_initialized:
            return None
        return self._state_machine.winner()
    
    def time_remaining(self) -> float:
        """当前回合剩余倒计时（秒）"""
        if not self.is_initialized:
            return 0.0
        return self._state_machine.time_remaining(self.clock())
    
    def player(self, side) -> Optional[PlayerSnapshot]:
        """
        获取玩家快照
        
        Args:
            side: 对局一方
        
        Returns:
            Optional[PlayerSnapshot]: 快照；倒计时期间 gesture 为 None
        """
        target = parse_side(side)
        player = self._players.get(target) if target else None
        if player is None:
            return None
        
        hidden = self._state_machine.is_round_active()
        return PlayerSnapshot(
            name=player.name,
            kind=player.kind,
            has_submitted=player.has_submitted,
            gesture=None if hidden else player.current_gesture,
            description=player.key_bindings_description(),
            opponent_history=tuple(player.opponent_history)
        )
