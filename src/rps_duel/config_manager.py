"""
游戏配置管理模块
Game Configuration Manager
"""
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Tuple
from .game import GameEngine, GameMode, DEFAULT_KEY_BINDINGS
from .game.events import Listener
from .game.players import ComputerDecisionEngine, clamp_difficulty
from .utils.config_loader import ConfigLoader
from .utils.exceptions import ConfigurationException
from .utils.logger import setup_logger

logger = setup_logger("RPS.ConfigManager")

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "config.yaml"

_BINDING_ORDER = ('rock', 'paper', 'scissors')


@dataclass(frozen=True)
class GameSettings:
    """对局配置"""
    mode: GameMode = GameMode.PLAYER_VS_COMPUTER
    max_rounds: int = 5
    countdown_seconds: float = 3.0
    difficulty: int = 1
    name_a: str = ""
    name_b: str = ""
    key_bindings: Dict[str, Tuple[str, str, str]] = field(
        default_factory=lambda: dict(DEFAULT_KEY_BINDINGS)
    )
    seed: Optional[int] = None
    
    @classmethod
    def from_config(cls, game_config: Dict[str, Any]) -> "GameSettings":
        """
        从 game 配置段创建配置
        
        Args:
            game_config: game 配置字典
        
        Returns:
            GameSettings: 对局配置
        
        Raises:
            ConfigurationException: 配置值类型或取值无效
        """
        defaults = cls()
        
        mode = defaults.mode
        if 'mode' in game_config:
            mode = GameMode.from_string(game_config['mode'])
            if mode is None:
                raise ConfigurationException(
                    f"未知对局模式: {game_config['mode']!r}", config_key="game.mode"
                )
        
        max_rounds = _int_value(game_config, 'max_rounds', defaults.max_rounds)
        if max_rounds < 1:
            raise ConfigurationException(
                f"最大回合数必须为正整数: {max_rounds}", config_key="game.max_rounds"
            )
        
        countdown = game_config.get('countdown_seconds', defaults.countdown_seconds)
        if isinstance(countdown, bool) or not isinstance(countdown, (int, float)) or countdown <= 0:
            raise ConfigurationException(
                f"倒计时必须为正数: {countdown!r}", config_key="game.countdown_seconds"
            )
        
        difficulty = _int_value(game_config, 'difficulty', defaults.difficulty)
        if clamp_difficulty(difficulty) != difficulty:
            logger.warning(f"难度 {difficulty} 超出范围，截断为 {clamp_difficulty(difficulty)}")
            difficulty = clamp_difficulty(difficulty)
        
        names = game_config.get('player_names') or {}
        if not isinstance(names, dict):
            raise ConfigurationException("player_names 必须是映射", config_key="game.player_names")
        
        seed = game_config.get('seed')
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise ConfigurationException(f"随机种子必须为整数: {seed!r}", config_key="game.seed")
        
        return cls(
            mode=mode,
            max_rounds=max_rounds,
            countdown_seconds=float(countdown),
            difficulty=difficulty,
            name_a=str(names.get('a') or ""),
            name_b=str(names.get('b') or ""),
            key_bindings=_parse_key_bindings(game_config.get('key_bindings') or {}),
            seed=seed
        )
    
    def with_overrides(self, **overrides) -> "GameSettings":
        """返回覆盖了非 None 字段的新配置"""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if 'difficulty' in changes:
            changes['difficulty'] = clamp_difficulty(changes['difficulty'])
        if 'mode' in changes:
            mode = GameMode.from_string(changes['mode'])
            if mode is None:
                raise ConfigurationException(f"未知对局模式: {changes['mode']!r}", config_key="mode")
            changes['mode'] = mode
        if changes.get('max_rounds', 1) < 1:
            raise ConfigurationException("最大回合数必须为正整数", config_key="max_rounds")
        return replace(self, **changes)
    
    def to_config(self) -> Dict[str, Any]:
        """转换为可写入 YAML 的 game 配置段"""
        config = {
            'mode': self.mode.value,
            'max_rounds': self.max_rounds,
            'countdown_seconds': self.countdown_seconds,
            'difficulty': self.difficulty,
            'player_names': {'a': self.name_a, 'b': self.name_b},
            'key_bindings': {
                slot: dict(zip(_BINDING_ORDER, keys))
                for slot, keys in self.key_bindings.items()
            },
        }
        if self.seed is not None:
            config['seed'] = self.seed
        return config


def _int_value(config: Dict[str, Any], key: str, default: int) -> int:
    value = config.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationException(f"{key} 必须为整数: {value!r}", config_key=f"game.{key}")
    return value


def _parse_key_bindings(raw: Dict[str, Any]) -> Dict[str, Tuple[str, str, str]]:
    """
    解析按键配置，例如 {'pvp_a': {'rock': 'a', 'paper': 's', 'scissors': 'd'}}
    
    Raises:
        ConfigurationException: 槽位未知、按键不是单字符、重复，或双人模式双方按键冲突
    """
    if not isinstance(raw, dict):
        raise ConfigurationException("key_bindings 必须是映射", config_key="game.key_bindings")
    
    bindings = dict(DEFAULT_KEY_BINDINGS)
    for slot, mapping in raw.items():
        config_key = f"game.key_bindings.{slot}"
        if slot not in DEFAULT_KEY_BINDINGS:
            raise ConfigurationException(f"未知按键槽位: {slot}", config_key=config_key)
        if not isinstance(mapping, dict):
            raise ConfigurationException("按键槽位必须是映射", config_key=config_key)
        
        keys = []
        for gesture_name in _BINDING_ORDER:
            key = mapping.get(gesture_name)
            if not isinstance(key, str) or len(key) != 1:
                raise ConfigurationException(
                    f"{gesture_name} 的按键必须是单个字符: {key!r}", config_key=config_key
                )
            keys.append(key.lower())
        if len(set(keys)) != len(keys):
            raise ConfigurationException(f"按键重复: {keys}", config_key=config_key)
        bindings[slot] = tuple(keys)
    
    if set(bindings['pvp_a']) & set(bindings['pvp_b']):
        raise ConfigurationException("双人模式双方按键不能重复", config_key="game.key_bindings")
    
    return bindings


class GameConfigManager:
    """游戏配置管理器，负责加载配置和创建游戏引擎"""
    
    def __init__(self, config_path: Optional[str] = None):
        """
        初始化游戏配置管理器
        
        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH
        
        self.config_path = str(config_path)
        self.config: Dict[str, Any] = {}
        self._settings = GameSettings()
    
    def load_config(self) -> bool:
        """
        加载并校验配置文件
        
        Returns:
            bool: 加载是否成功；失败时保留默认配置
        """
        try:
            config = ConfigLoader.load_config(self.config_path)
            settings = GameSettings.from_config(ConfigLoader.get_game_config(config))
        except FileNotFoundError as e:
            logger.error(f"游戏配置加载失败: {e}")
            return False
        except ConfigurationException as e:
            logger.error(f"游戏配置无效 [键: {e.config_key}]: {e.message}")
            return False
        except Exception as e:
            logger.error(f"游戏配置加载失败: {e}")
            return False
        
        self.config = config
        self._settings = settings
        logger.info("游戏配置加载成功")
        return True
    
    def get_settings(self) -> GameSettings:
        """获取对局配置"""
        return self._settings
    
    def set_settings(self, settings: GameSettings):
        self._settings = settings
    
    def get_logging_config(self) -> Dict[str, Any]:
        """获取日志配置"""
        return ConfigLoader.get_logging_config(self.config)
    
    def save_settings(self, config_path: Optional[str] = None) -> bool:
        """
        将当前对局配置写回 YAML 文件
        
        Args:
            config_path: 目标路径，默认写回加载路径
        
        Returns:
            bool: 保存是否成功
        """
        config = dict(self.config)
        config['game'] = self._settings.to_config()
        return ConfigLoader.save_config(config, config_path or self.config_path)
    
    def build_engine(self, clock: Optional[Callable[[], float]] = None) -> GameEngine:
        """
        根据配置创建游戏引擎（尚未初始化对局，便于先注册监听器）
        
        Args:
            clock: 时钟函数（可选）
        
        Returns:
            GameEngine: 游戏引擎
        """
        settings = self._settings
        return GameEngine(
            clock=clock,
            decision_engine=ComputerDecisionEngine.seeded(settings.seed),
            countdown_seconds=settings.countdown_seconds,
            key_bindings=settings.key_bindings
        )
    
    def initialize_engine(self, engine: GameEngine) -> bool:
        """按配置初始化对局"""
        settings = self._settings
        if not engine.initialize(settings.mode, settings.max_rounds,
                                 settings.name_a, settings.name_b, settings.difficulty):
            logger.error("游戏引擎初始化失败")
            return False
        
        logger.info(f"对局已按配置初始化: {settings.mode.display_name}, 最大回合数 {settings.max_rounds}")
        return True
    
    def create_engine(self, clock: Optional[Callable[[], float]] = None,
                      listeners: Iterable[Listener] = ()) -> Optional[GameEngine]:
        """
        根据配置创建并初始化游戏引擎
        
        Args:
            clock: 时钟函数（可选）
            listeners: 在初始化之前注册的监听器，以便收到对局初始化通知
        
        Returns:
            Optional[GameEngine]: 已初始化的引擎，初始化失败返回None
        """
        engine = self.build_engine(clock)
        for listener in listeners:
            engine.add_listener(listener)
        
        if not self.initialize_engine(engine):
            return None
        return engine
