"""Recovery module - Gap detection and backfill."""

from .gap_recovery import GapRecoveryEngine, count_gaps, find_gaps

__all__ = [
    'GapRecoveryEngine',
    'count_gaps',
    'find_gaps',
]
