"""Session module - End-to-end run orchestration."""

from .orchestrator import SessionOrchestrator, SessionContext

__all__ = [
    'SessionOrchestrator',
    'SessionContext',
]
