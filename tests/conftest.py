"""
测试公共夹具
Shared Test Fixtures
"""
import sys
from pathlib import Path

import pytest

# 添加 src 目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from rps_duel.game import GameEngine, ComputerDecisionEngine


class FakeClock:
    """可手动推进的时钟"""
    
    def __init__(self, now: float = 100.0):
        self.now = now
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float):
        self.now += seconds


class StubRng:
    """按预设序列返回的随机数源（numpy.random.Generator 接口的子集）"""
    
    def __init__(self, floats=(), ints=()):
        self.floats = list(floats)
        self.ints = list(ints)
        self.float_calls = 0
        self.int_calls = 0
    
    def random(self) -> float:
        self.float_calls += 1
        # 默认不触发随机探索
        return self.floats.pop(0) if self.floats else 0.99
    
    def integers(self, low, high):
        self.int_calls += 1
        return self.ints.pop(0) if self.ints else low


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return StubRng()


@pytest.fixture
def events():
    return []


@pytest.fixture
def make_engine(clock, events):
    """创建带假时钟和事件记录的引擎"""
    
    def _make(rng=None, countdown_seconds=3.0):
        engine = GameEngine(
            clock=clock,
            decision_engine=ComputerDecisionEngine(rng or StubRng()),
            countdown_seconds=countdown_seconds
        )
        engine.add_listener(events.append)
        return engine
    
    return _make
