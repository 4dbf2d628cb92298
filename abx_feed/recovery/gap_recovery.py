"""
Gap Recovery Engine - Backfills missing sequence numbers.

For every sequence in [1, max_sequence] that the store has not seen:
1. Open a fresh session (the protocol allows one re-send per connection)
2. Send a RESEND request for the sequence
3. Read at most one record
4. Close the session
5. Pause for the fixed courtesy delay

Each missing sequence gets exactly one attempt. Failures are tallied and
logged, never raised: the pass always runs to the end of the range.

Re-send requests carry the sequence in one byte, so sequences above 255
request ``sequence % 256`` from the server. A warning is logged for each
such request; whatever record comes back is stored as received.
"""

import time
from typing import Callable, Iterable, List, Optional

from ..connectors.transport import TransportFactory, TransportSession
from ..core.codec import encode_request, decode_record, truncate_sequence
from ..core.constants import Opcode, RECORD_SIZE, MAX_RESEND_SEQUENCE, DEFAULT_BACKFILL_DELAY_MS
from ..core.exceptions import FeedConnectionError, SendError, ReceiveError
from ..core.types import ProgressCallback, RecoveryTally
from ..data.record_store import RecordStore
from ..monitoring.logger import get_logger


def find_gaps(max_sequence: int, sequences: Iterable[int]) -> List[int]:
    """
    Sequence numbers in [1, max_sequence] absent from ``sequences``.
    
    Args:
        max_sequence: Highest sequence observed (0 or less means no range)
        sequences: Sequences already received
    
    Returns:
        Missing sequences in ascending order
    """
    seen = sequences if isinstance(sequences, (set, frozenset)) else set(sequences)
    return [seq for seq in range(1, max_sequence + 1) if seq not in seen]


def count_gaps(max_sequence: int, sequences: Iterable[int]) -> int:
    """Number of sequences in [1, max_sequence] absent from ``sequences``, without listing them."""
    if max_sequence <= 0:
        return 0
    seen = sequences if isinstance(sequences, (set, frozenset)) else set(sequences)
    return max_sequence - sum(1 for seq in seen if 1 <= seq <= max_sequence)


class GapRecoveryEngine:
    """
    Re-requests missing sequences one connection at a time.
    
    Runs synchronously on the caller's thread, in ascending sequence order.
    """
    
    def __init__(
        self,
        host: str,
        port: int,
        transport_factory: Optional[TransportFactory] = None,
        delay_seconds: float = DEFAULT_BACKFILL_DELAY_MS / 1000.0,
        sleep: Callable[[float], None] = time.sleep,
        on_progress: Optional[ProgressCallback] = None
    ):
        """
        Initialize recovery engine.
        
        Args:
            host: Feed server address
            port: Feed server port
            transport_factory: Callable opening a session; defaults to TCP
            delay_seconds: Fixed pause after each attempt that reached the server
            sleep: Sleep function (injectable for tests)
            on_progress: Called with (sequence, max_sequence) for every scanned sequence
        """
        self.host = host
        self.port = port
        self.transport_factory = transport_factory or TransportSession.open
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self.on_progress = on_progress
        
        self.logger = get_logger(__name__)
    
    def recover(self, store: RecordStore, max_sequence: Optional[int] = None) -> RecoveryTally:
        """
        Backfill every gap in [1, max_sequence] into ``store``.
        
        Args:
            store: Record store to scan and extend
            max_sequence: Upper bound of the range; defaults to store.max_sequence()
        
        Returns:
            Tally of missing and recovered sequences
        """
        if max_sequence is None:
            max_sequence = store.max_sequence()
        
        tally = RecoveryTally()
        
        self.logger.info("Validating data integrity", max_sequence=max_sequence)
        
        for seq in range(1, max_sequence + 1):
            if self.on_progress:
                self.on_progress(seq, max_sequence)
            
            if store.contains(seq):
                continue
            
            tally.missing += 1
            if self._recover_one(store, seq):
                tally.recovered += 1
            else:
                tally.unrecovered.append(seq)
        
        self.logger.info(
            "Gap recovery finished",
            missing=tally.missing,
            recovered=tally.recovered,
            failed=tally.failed
        )
        return tally
    
    def _recover_one(self, store: RecordStore, seq: int) -> bool:
        """Attempt one re-send of ``seq``. Returns True if a record was stored."""
        self.logger.info("Requesting sequence number", sequence=seq)
        
        if seq > MAX_RESEND_SEQUENCE:
            self.logger.warning(
                "Sequence exceeds re-send parameter range; server will see truncated value",
                sequence=seq,
                requested=truncate_sequence(seq)
            )
        
        try:
            session = self.transport_factory(self.host, self.port)
        except FeedConnectionError as e:
            self.logger.error("Connection attempt failed", sequence=seq, error=str(e))
            return False
        
        try:
            try:
                session.send(encode_request(Opcode.RESEND, seq))
            except SendError as e:
                self.logger.warning("Re-send request not sent, reading anyway", sequence=seq, error=str(e))
            
            try:
                data = session.receive_exact(RECORD_SIZE)
            except ReceiveError as e:
                self.logger.error("Data reception error", sequence=seq, error=str(e))
                return False
            
            if data is None:
                self.logger.warning("Server closed without data", sequence=seq)
                return False
            
            record = decode_record(data)
            store.add(record)
            self.logger.info(
                "Data recovered",
                sequence=record.sequence,
                symbol=record.display_symbol
            )
            return True
        finally:
            session.close()
            self._sleep(self.delay_seconds)
