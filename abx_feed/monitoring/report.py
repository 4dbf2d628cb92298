"""
Session Report - Summary of one client run.

Reports:
- Total records and session duration
- Processing rate
- Gap recovery results and success rate
"""

from typing import Any, Dict

from ..core.types import SessionResult
from .logger import get_logger


def build_summary(result: SessionResult) -> Dict[str, Any]:
    """
    Collect the report numbers for a finished run.
    
    The processing rate divides by whole seconds, with a floor of one.
    """
    duration = int(result.elapsed_seconds)
    tally = result.tally
    
    return {
        'state': result.state.value,
        'total_records': result.total_records,
        'duration_seconds': duration,
        'records_per_second': result.total_records // (duration or 1),
        'expected_sequences': result.max_sequence,
        'missing': tally.missing,
        'recovered': tally.recovered,
        'unrecovered': list(tally.unrecovered),
        'success_rate': tally.success_rate,
    }


class SessionReporter:
    """Writes the session report through the package logger."""
    
    def __init__(self):
        self.logger = get_logger(__name__)
    
    def report(self, result: SessionResult) -> Dict[str, Any]:
        """Log the recovery results and session report; return the summary."""
        summary = build_summary(result)
        
        if result.tally.complete:
            self.logger.info(
                f"COMPLETE: Successfully recovered all {summary['missing']} missing records"
            )
        else:
            self.logger.warning(
                f"NOTICE: Recovered {summary['recovered']} of {summary['missing']} missing records",
                unrecovered=summary['unrecovered']
            )
        
        self.logger.info(
            "Data recovery results",
            expected=summary['expected_sequences'],
            missing=summary['missing'],
            recovered=summary['recovered'],
            success_rate=f"{summary['success_rate']:.1f}%"
        )
        
        self.logger.info(
            "Session report",
            total_records=summary['total_records'],
            duration=f"{summary['duration_seconds']}s",
            rate=f"{summary['records_per_second']} rec/s"
        )
        
        return summary
