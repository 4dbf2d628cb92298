"""Core data types for the feed client.

This module defines the fundamental data structures used throughout the
feed client using dataclasses:
- Record is immutable (frozen); records are only ever appended, never edited
- Tallies and results are derived values computed once per run
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from .constants import SessionState


# Called as (done, total) while a stage works through its items
ProgressCallback = Callable[[int, int], None]


# ============================================================================
# Market Data Types
# ============================================================================

@dataclass(frozen=True)
class Record:
    """
    One market event received from the feed.
    
    Attributes:
        symbol: 4-character asset code (opaque, may contain NUL bytes)
        side: Single order direction character (opaque, not validated)
        size: Quantity, signed 32-bit
        price: Price in raw feed units, signed 32-bit
        sequence: Source-assigned sequence number, signed 32-bit
    """
    symbol: str
    side: str
    size: int
    price: int
    sequence: int
    
    @property
    def display_symbol(self) -> str:
        """Symbol with trailing NUL padding removed, for logs and exported files."""
        return self.symbol.rstrip("\x00")
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to the exported row layout (see EXPORT_COLUMNS)."""
        return {
            'assetCode': self.display_symbol,
            'orderDirection': self.side,
            'size': self.size,
            'cost': self.price,
            'sequenceNum': self.sequence,
        }


# ============================================================================
# Recovery Types
# ============================================================================

@dataclass
class RecoveryTally:
    """Counts produced by one gap recovery pass."""
    missing: int = 0
    recovered: int = 0
    unrecovered: List[int] = field(default_factory=list)
    
    @property
    def failed(self) -> int:
        """Missing sequences that could not be recovered."""
        return self.missing - self.recovered
    
    @property
    def success_rate(self) -> float:
        """Recovered share of missing sequences, in percent (100 if none missing)."""
        if self.missing == 0:
            return 100.0
        return self.recovered * 100.0 / self.missing
    
    @property
    def complete(self) -> bool:
        return self.recovered == self.missing


# ============================================================================
# Session Types
# ============================================================================

@dataclass
class SessionResult:
    """
    Outcome of one end-to-end client run.
    
    Records are sorted ascending by sequence. When the run was aborted the
    record list is empty and nothing was exported.
    """
    state: SessionState
    records: List[Record] = field(default_factory=list)
    tally: RecoveryTally = field(default_factory=RecoveryTally)
    max_sequence: int = 0
    elapsed_seconds: float = 0.0
    history: Tuple[SessionState, ...] = ()
    
    @property
    def succeeded(self) -> bool:
        return self.state == SessionState.DONE
    
    @property
    def total_records(self) -> int:
        return len(self.records)
