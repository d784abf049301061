from dataclasses import dataclass, field
from typing import Dict, List
from collections import Counter
import threading
import time


@dataclass
class AnalysisMetrics:
    """Crowd analysis service metrics"""
    uptime_seconds: float
    analyses_performed: int
    avg_analysis_time_ms: float
    fallbacks_by_signal: Dict[str, int] = field(default_factory=dict)
    decisions_by_action: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'uptime_seconds': self.uptime_seconds,
            'analyses_performed': self.analyses_performed,
            'avg_analysis_time_ms': self.avg_analysis_time_ms,
            'fallbacks_by_signal': dict(self.fallbacks_by_signal),
            'decisions_by_action': dict(self.decisions_by_action),
        }


class MetricsCollector:
    """Collects and aggregates analysis metrics"""

    def __init__(self):
        self.analysis_times: List[float] = []
        self.analyses_performed = 0
        self.fallbacks: Counter = Counter()
        self.decisions: Counter = Counter()
        self.start_time = time.time()
        self._lock = threading.Lock()

    def record_analysis(self, duration_ms: float):
        with self._lock:
            self.analysis_times.append(duration_ms)
            self.analyses_performed += 1
            # Keep buffer size manageable
            if len(self.analysis_times) > 1000:
                self.analysis_times.pop(0)

    def record_fallback(self, signal: str):
        with self._lock:
            self.fallbacks[signal] += 1

    def record_decision(self, action: str):
        with self._lock:
            self.decisions[action] += 1

    def get_metrics(self) -> AnalysisMetrics:
        with self._lock:
            avg = sum(self.analysis_times) / len(self.analysis_times) if self.analysis_times else 0.0
            return AnalysisMetrics(
                uptime_seconds=time.time() - self.start_time,
                analyses_performed=self.analyses_performed,
                avg_analysis_time_ms=avg,
                fallbacks_by_signal=dict(self.fallbacks),
                decisions_by_action=dict(self.decisions),
            )
