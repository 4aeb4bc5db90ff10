"""
Pydantic models for tidyroot.

Shared data models across the application.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


# =====================================================
# Run Loop Models
# =====================================================

class RunOptions(BaseModel):
    """Parameters for one scan-and-relocate pass."""
    eager_provision: bool = False
    debounce_interval_ms: int = Field(default=1500, gt=0)
    startup: bool = False


class RunSummary(BaseModel):
    """Outcome counts for a finished pass."""
    started: datetime
    finished: Optional[datetime] = None
    scan_failed: bool = False
    outcomes: Dict[str, int] = {}

    @property
    def total(self) -> int:
        return sum(self.outcomes.values())


# =====================================================
# Relocation Models
# =====================================================

class RelocationState(str, Enum):
    """States an entry passes through while being relocated."""
    RESOLVED = "resolved"
    ATTEMPTING = "attempting"
    MOVED = "moved"
    SKIPPED_EXISTS = "skipped_exists"
    NEEDS_FOLDER = "needs_folder"
    BUSY = "busy"
    ABANDONED = "abandoned"
    VANISHED = "vanished"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({
    RelocationState.MOVED,
    RelocationState.SKIPPED_EXISTS,
    RelocationState.ABANDONED,
    RelocationState.VANISHED,
})


class RelocationResult(BaseModel):
    """Terminal outcome of one relocation attempt."""
    name: str
    category: str
    state: RelocationState
    attempts: int = 0
