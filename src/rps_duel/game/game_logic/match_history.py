"""
对局回合记录
Match Round History
"""
from typing import Optional, List
from dataclasses import dataclass, field
from datetime import datetime
from .gesture import Gesture
from ..state_machine.match_state import Side


@dataclass(frozen=True)
class RoundRecord:
    """回合记录数据类"""
    round_number: int
    gesture_a: Optional[Gesture]
    gesture_b: Optional[Gesture]
    winner: Optional[Side]
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)
    
    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            'round_number': self.round_number,
            'gesture_a': self.gesture_a.value if self.gesture_a else None,
            'gesture_b': self.gesture_b.value if self.gesture_b else None,
            'winner': self.winner.name if self.winner else None,
            'reason': self.reason,
            'timestamp': self.timestamp.isoformat()
        }


class MatchHistory:
    """单场对局内的回合记录，仅保存在内存中"""
    
    def __init__(self):
        self._records: List[RoundRecord] = []
    
    def __len__(self) -> int:
        return len(self._records)
    
    def add(self, record: RoundRecord):
        self._records.append(record)
    
    def last(self) -> Optional[RoundRecord]:
        """获取上一回合记录"""
        if self._records:
            return self._records[-1]
        return None
    
    @property
    def records(self) -> List[RoundRecord]:
        """获取回合记录（副本）"""
        return self._records.copy()
    
    def clear(self):
        self._records.clear()
    
    def to_list(self) -> List[dict]:
        return [record.to_dict() for record in self._records]
