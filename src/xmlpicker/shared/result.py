"""Run statistics for streaming XML picking."""

import time
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class BuildStatistics:
    """Counters maintained by the tree builder during one parse."""

    tokens_consumed: int = 0
    elements_seen: int = 0
    matches_yielded: int = 0
    text_nodes_recorded: int = 0
    max_depth_seen: int = 0
    started_at: float = field(default_factory=time.monotonic)
    finished_at: float = 0.0

    @property
    def processing_time_ms(self) -> float:
        """Wall time between builder creation and exhaustion or failure."""
        end = self.finished_at or time.monotonic()
        return (end - self.started_at) * 1000.0

    @property
    def tokens_per_second(self) -> float:
        """Calculate tokens consumed per second."""
        elapsed = self.processing_time_ms
        if elapsed <= 0:
            return 0.0
        return (self.tokens_consumed * 1000.0) / elapsed

    def finish(self) -> None:
        """Freeze the processing time."""
        if not self.finished_at:
            self.finished_at = time.monotonic()

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary representation."""
        return {
            "tokens_consumed": self.tokens_consumed,
            "elements_seen": self.elements_seen,
            "matches_yielded": self.matches_yielded,
            "text_nodes_recorded": self.text_nodes_recorded,
            "max_depth_seen": self.max_depth_seen,
            "processing_time_ms": round(self.processing_time_ms, 3),
        }
