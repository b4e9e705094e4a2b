"""
应用程序主类
Application Main Class

命令行宿主：逐行读取按键并交给 GameEngine，每读完一行检查一次倒计时。
"""
import signal
import sys
from typing import Any, Dict, Optional, TextIO
from .config_manager import GameConfigManager
from .game import (
    GameEngine, GameEvent, InputGuard, MatchInitialized, RoundStarted,
    GestureSubmitted, RoundResolved, MatchEnded, Side
)
from .utils.error_handler import global_error_handler
from .utils.exceptions import ConfigurationException, GameException
from .utils.logger import apply_log_level, setup_logger, setup_logger_from_config

logger = setup_logger("RPS.App")

QUIT_COMMANDS = ('q', 'quit', 'exit')


class ConsolePresenter:
    """把引擎通知打印到终端"""
    
    def __init__(self, engine: GameEngine, output: Optional[TextIO] = None):
        self.engine = engine
        self.output = output or sys.stdout
    
    def __call__(self, event: GameEvent):
        if isinstance(event, MatchInitialized):
            self._print(f"=== {event.mode.display_name}, best of {event.max_rounds} ===")
            for side in Side:
                snapshot = self.engine.player(side)
                if snapshot:
                    self._print(f"  {snapshot.description}")
        elif isinstance(event, RoundStarted):
            self._print(f"--- Round {event.round_index} "
                        f"({self.engine.countdown_seconds:g}s to choose) ---")
        elif isinstance(event, GestureSubmitted):
            self._print(f"  {self._name(event.side)} has chosen")
        elif isinstance(event, RoundResolved):
            gesture_a = event.gesture_a.display_name if event.gesture_a else "-"
            gesture_b = event.gesture_b.display_name if event.gesture_b else "-"
            self._print(f"  {self._name(Side.A)}: {gesture_a}  |  {self._name(Side.B)}: {gesture_b}")
            self._print(f"  {event.reason}")
        elif isinstance(event, MatchEnded):
            counters = event.counters
            self._print(f"=== Final score {counters.wins_a}:{counters.wins_b} "
                        f"(draws {counters.draws}) ===")
            if event.winner is None:
                self._print("The match is a draw!")
            else:
                self._print(f"{self._name(event.winner)} wins the match!")
    
    def _name(self, side: Side) -> str:
        snapshot = self.engine.player(side)
        return snapshot.name if snapshot else str(side)
    
    def _print(self, text: str):
        print(text, file=self.output)


class Application:
    """应用程序主类"""
    
    def __init__(self, config_path: Optional[str] = None,
                 overrides: Optional[Dict[str, Any]] = None,
                 input_stream: Optional[TextIO] = None,
                 output: Optional[TextIO] = None):
        """
        初始化应用程序
        
        Args:
            config_path: 配置文件路径
            overrides: 覆盖配置的命令行参数（mode, max_rounds, difficulty, seed）
            input_stream: 按键输入流，默认 sys.stdin
            output: 输出流，默认 sys.stdout
        """
        self.config_manager = GameConfigManager(config_path)
        self.overrides = overrides or {}
        self.input_stream = input_stream or sys.stdin
        self.output = output or sys.stdout
        
        self.engine: Optional[GameEngine] = None
        self.input_guard = InputGuard(on_cheat_detected=self._on_cheat_detected)
        
        self.is_running = False
        self.should_exit = False
        
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)
    
    def _signal_handler(self, signum, frame):
        """信号处理函数"""
        logger.info(f"收到信号 {signum}，准备退出")
        self.should_exit = True
    
    def _on_cheat_detected(self, reason: str):
        print(f"  ! {reason}", file=self.output)
    
    def initialize(self) -> bool:
        """
        加载配置并创建游戏引擎
        
        Returns:
            bool: 初始化是否成功
        """
        if not self.config_manager.load_config():
            logger.warning(f"使用默认配置（无法加载 {self.config_manager.config_path}）")
        
        logging_config = self.config_manager.get_logging_config()
        if logging_config:
            root_logger = setup_logger_from_config(logging_config, "RPS")
            apply_log_level(root_logger.level)
        
        try:
            settings = self.config_manager.get_settings().with_overrides(**self.overrides)
        except ConfigurationException as e:
            global_error_handler.handle(e, "命令行参数")
            return False
        self.config_manager.set_settings(settings)
        
        engine = self.config_manager.build_engine()
        engine.add_listener(ConsolePresenter(engine, self.output))
        if not self.config_manager.initialize_engine(engine):
            global_error_handler.handle(GameException("游戏引擎创建失败"), "初始化")
            return False
        
        self.engine = engine
        self.is_running = True
        logger.info("应用程序初始化成功")
        return True
    
    def run(self):
        """运行主循环，直到对局结束、输入结束或收到退出命令"""
        if not self.is_running:
            logger.error("应用程序未初始化，无法运行")
            return
        
        engine = self.engine
        engine.start_round()
        
        while not self.should_exit and not engine.is_match_finished:
            line = self.input_stream.readline()
            if not line:
                break
            
            command = line.strip()
            if command.lower() in QUIT_COMMANDS:
                break
            
            # 同一行内重复的按键视为按住不放，整行处理完后才松开
            for symbol in command:
                if self.input_guard.key_pressed(symbol):
                    engine.process_key(symbol)
            for symbol in set(command):
                self.input_guard.key_released(symbol)
            
            engine.check_round_completion()
            if not engine.is_round_active and not engine.is_match_finished:
                engine.start_round()
        
        self.stop()
    
    def start(self) -> bool:
        """初始化并运行"""
        if not self.initialize():
            return False
        self.run()
        return True
    
    def stop(self):
        """停止应用程序"""
        self.is_running = False
        logger.info("应用程序已停止")
