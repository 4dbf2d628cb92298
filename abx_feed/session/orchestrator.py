"""
Session Orchestrator - Drives one end-to-end client run.

Flow:
1. CONNECTING   open a session (failure -> ABORTED, nothing exported)
2. STREAMING    request the full stream and store records until closure
3. GAP_SCAN     find the highest sequence received
4. BACKFILLING  re-request every missing sequence
5. SORTING      order all records ascending by sequence
6. EXPORTING    hand the ordered records to the exporter
7. DONE         emit the session report

Only the initial connect can end a run early. Receive errors while
streaming end the stream and keep what arrived; backfill failures are
counted in the tally.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

from ..connectors.transport import TransportFactory, TransportSession, default_transport_factory
from ..core.codec import encode_request, decode_record
from ..core.config import FeedConfig
from ..core.constants import Opcode, RECORD_SIZE, SessionState
from ..core.exceptions import FeedConnectionError, SendError, ReceiveError
from ..core.types import ProgressCallback, Record, RecoveryTally, SessionResult
from ..data.record_store import RecordStore
from ..monitoring.logger import get_logger
from ..recovery.gap_recovery import GapRecoveryEngine, count_gaps


class Exporter(Protocol):
    def export(self, records: List[Record]): ...


class Reporter(Protocol):
    def report(self, result: SessionResult): ...


@dataclass
class SessionContext:
    """Mutable state of one run, passed explicitly to every phase."""
    config: FeedConfig
    store: RecordStore = field(default_factory=RecordStore)
    state: SessionState = SessionState.CONNECTING
    history: List[SessionState] = field(default_factory=lambda: [SessionState.CONNECTING])
    max_sequence: int = 0
    tally: RecoveryTally = field(default_factory=RecoveryTally)
    ordered: List[Record] = field(default_factory=list)
    started_at: float = field(default_factory=time.monotonic)
    
    def transition(self, state: SessionState) -> None:
        self.state = state
        self.history.append(state)


class SessionOrchestrator:
    """
    Runs the streaming, backfill, sorting and export phases in order.
    
    Single-threaded and blocking: every network call completes before the
    next phase starts.
    """
    
    def __init__(
        self,
        config: FeedConfig,
        transport_factory: Optional[TransportFactory] = None,
        exporter: Optional[Exporter] = None,
        reporter: Optional[Reporter] = None,
        sleep: Callable[[float], None] = time.sleep,
        on_progress: Optional[ProgressCallback] = None
    ):
        """
        Initialize orchestrator.
        
        Args:
            config: Connection and recovery settings
            transport_factory: Callable opening a session; defaults to TCP with config.receive_timeout
            exporter: Receives the ordered records (skipped if None)
            reporter: Receives the final SessionResult (skipped if None)
            sleep: Sleep function used between backfill attempts
            on_progress: Backfill progress callback
        """
        self.config = config
        self.transport_factory = transport_factory or default_transport_factory(config.receive_timeout)
        self.exporter = exporter
        self.reporter = reporter
        self.recovery = GapRecoveryEngine(
            host=config.host,
            port=config.port,
            transport_factory=self.transport_factory,
            delay_seconds=config.backfill_delay_seconds,
            sleep=sleep,
            on_progress=on_progress
        )
        
        self.logger = get_logger(__name__)
    
    def run(self) -> SessionResult:
        """
        Execute one complete run.
        
        Returns:
            SessionResult in state DONE, or ABORTED if the initial connect failed
        """
        ctx = SessionContext(config=self.config)
        
        session = self.connect(ctx)
        if session is None:
            return self._result(ctx)
        
        self.stream(ctx, session)
        self.scan(ctx)
        self.backfill(ctx)
        self.sort(ctx)
        self.export(ctx)
        
        ctx.transition(SessionState.DONE)
        result = self._result(ctx)
        
        if self.reporter is not None:
            self.reporter.report(result)
        
        self.logger.info("Process complete", records=result.total_records)
        return result
    
    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------
    
    def connect(self, ctx: SessionContext) -> Optional[TransportSession]:
        """CONNECTING: open the streaming session, or move to ABORTED."""
        try:
            session = self.transport_factory(ctx.config.host, ctx.config.port)
        except FeedConnectionError as e:
            self.logger.critical("Initial connection failed - aborting", error=str(e))
            ctx.transition(SessionState.ABORTED)
            return None
        
        self.logger.info("Connected to data server", host=ctx.config.host, port=ctx.config.port)
        return session
    
    def stream(self, ctx: SessionContext, session: TransportSession) -> None:
        """STREAMING: request everything and store records until the stream ends."""
        ctx.transition(SessionState.STREAMING)
        
        try:
            self.logger.info("Requesting initial data stream")
            try:
                session.send(encode_request(Opcode.STREAM_ALL, 0))
            except SendError as e:
                self.logger.warning("Stream request not sent, reading anyway", error=str(e))
            
            while True:
                try:
                    data = session.receive_exact(RECORD_SIZE)
                except ReceiveError as e:
                    self.logger.error(
                        "Data reception error; ending stream",
                        received=len(ctx.store),
                        error=str(e)
                    )
                    break
                
                if data is None:
                    break
                
                record = decode_record(data)
                ctx.store.add(record)
                self.logger.debug(
                    "Received record",
                    sequence=record.sequence,
                    symbol=record.display_symbol
                )
        finally:
            session.close()
        
        self.logger.info("Initial data stream complete", records=len(ctx.store))
    
    def scan(self, ctx: SessionContext) -> None:
        """GAP_SCAN: determine the expected sequence range."""
        ctx.transition(SessionState.GAP_SCAN)
        ctx.max_sequence = ctx.store.max_sequence()
        self.logger.info(
            "Highest sequence number",
            max_sequence=ctx.max_sequence,
            gaps=count_gaps(ctx.max_sequence, ctx.store.sequences)
        )
    
    def backfill(self, ctx: SessionContext) -> None:
        """BACKFILLING: recover missing sequences one connection at a time."""
        ctx.transition(SessionState.BACKFILLING)
        ctx.tally = self.recovery.recover(ctx.store, ctx.max_sequence)
    
    def sort(self, ctx: SessionContext) -> None:
        """SORTING: stable ascending order by sequence."""
        ctx.transition(SessionState.SORTING)
        ctx.ordered = ctx.store.sorted_by_sequence()
    
    def export(self, ctx: SessionContext) -> None:
        """EXPORTING: hand the ordered records to the exporter."""
        ctx.transition(SessionState.EXPORTING)
        if self.exporter is not None:
            self.exporter.export(ctx.ordered)
    
    def _result(self, ctx: SessionContext) -> SessionResult:
        return SessionResult(
            state=ctx.state,
            records=list(ctx.ordered),
            tally=ctx.tally,
            max_sequence=ctx.max_sequence,
            elapsed_seconds=time.monotonic() - ctx.started_at,
            history=tuple(ctx.history)
        )
