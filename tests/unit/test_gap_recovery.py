"""
Unit tests for the gap recovery engine.
"""

import pytest

from abx_feed.data.record_store import RecordStore
from abx_feed.recovery.gap_recovery import GapRecoveryEngine, count_gaps, find_gaps

from feed_fakes import FakeFeed, make_record


def _store(*sequences) -> RecordStore:
    store = RecordStore()
    for seq in sequences:
        store.add(make_record(seq))
    return store


def _engine(feed, sleeper, **kwargs) -> GapRecoveryEngine:
    return GapRecoveryEngine("10.0.0.1", 3000, transport_factory=feed, sleep=sleeper, **kwargs)


class TestFindGaps:
    
    def test_reports_missing_in_order(self):
        assert find_gaps(8, {1, 2, 4, 7}) == [3, 5, 6, 8]
    
    def test_no_range_no_gaps(self):
        assert find_gaps(0, set()) == []
    
    def test_accepts_any_iterable(self):
        assert find_gaps(3, [3, 1]) == [2]


class TestCountGaps:
    
    def test_matches_find_gaps(self):
        assert count_gaps(8, {1, 2, 4, 7}) == len(find_gaps(8, {1, 2, 4, 7})) == 4
    
    def test_ignores_out_of_range_and_duplicates(self):
        assert count_gaps(5, [0, -3, 2, 2, 9, 5]) == 3
    
    def test_no_range(self):
        assert count_gaps(0, {4}) == 0
    
    def test_large_range_does_not_list_sequences(self):
        assert count_gaps(2_000_000_000, {1, 2_000_000_000}) == 1_999_999_998


class TestRecover:
    """Test backfill of missing sequences."""
    
    def test_single_gap_recovered(self, sleeper):
        store = _store(1, 2, 4, 5)
        feed = FakeFeed(resend={3: make_record(3)})
        
        tally = _engine(feed, sleeper).recover(store)
        
        assert (tally.missing, tally.recovered) == (1, 1)
        assert tally.unrecovered == []
        assert [r.sequence for r in store.sorted_by_sequence()] == [1, 2, 3, 4, 5]
    
    def test_one_connection_per_missing_sequence(self, sleeper):
        store = _store(2, 5)
        feed = FakeFeed(resend={s: make_record(s) for s in (1, 3, 4)})
        
        tally = _engine(feed, sleeper).recover(store)
        
        assert tally.recovered == 3
        assert feed.requests == [b"\x02\x01", b"\x02\x03", b"\x02\x04"]
        assert feed.endpoints == [("10.0.0.1", 3000)] * 3
        assert all(s.close_count == 1 for s in feed.sessions)
    
    def test_connect_failure_skips_sequence(self, sleeper):
        store = _store(1, 2, 4, 5)
        feed = FakeFeed(resend={3: make_record(3)}, fail_connects={1})
        
        tally = _engine(feed, sleeper).recover(store)
        
        assert (tally.missing, tally.recovered) == (1, 0)
        assert tally.unrecovered == [3]
        assert not store.contains(3)
        assert feed.attempts == 1
    
    def test_server_closing_without_data_is_unrecovered(self, sleeper):
        store = _store(1, 3)
        feed = FakeFeed()
        
        tally = _engine(feed, sleeper).recover(store)
        
        assert (tally.missing, tally.recovered) == (1, 0)
        assert feed.sessions[0].closed
    
    def test_receive_error_is_unrecovered_and_closes(self, sleeper):
        store = _store(1, 3)
        feed = FakeFeed(resend={2: make_record(2)}, resend_errors={2})
        
        tally = _engine(feed, sleeper).recover(store)
        
        assert tally.recovered == 0
        assert feed.sessions[0].close_count == 1
    
    def test_send_error_still_reads(self, sleeper, caplog):
        store = _store(1, 3)
        feed = FakeFeed(resend={2: make_record(2)}, fail_sends={1})
        
        tally = _engine(feed, sleeper).recover(store)
        
        assert tally.recovered == 1
        assert "Re-send request not sent" in caplog.text
    
    def test_no_retry_of_failed_sequence(self, sleeper):
        store = _store(1, 4)
        feed = FakeFeed(fail_connects={1, 2})
        
        tally = _engine(feed, sleeper).recover(store)
        
        assert feed.attempts == 2
        assert tally.unrecovered == [2, 3]
    
    def test_fixed_delay_after_each_attempt(self, sleeper):
        store = _store(1, 5)
        feed = FakeFeed(resend={2: make_record(2)}, fail_connects={2})
        
        _engine(feed, sleeper, delay_seconds=0.25).recover(store)
        
        # Attempts for 2 and 4 reached the server; 3 was refused
        assert sleeper.calls == [0.25, 0.25]
    
    def test_empty_store_performs_no_iterations(self, sleeper):
        feed = FakeFeed()
        progress = []
        
        tally = _engine(feed, sleeper, on_progress=lambda c, t: progress.append(c)).recover(RecordStore())
        
        assert (tally.missing, tally.recovered) == (0, 0)
        assert feed.attempts == 0
        assert progress == []
        assert tally.success_rate == 100.0
    
    def test_progress_called_for_every_scanned_sequence(self, sleeper):
        store = _store(1, 2, 4)
        feed = FakeFeed(resend={3: make_record(3)})
        progress = []
        
        _engine(feed, sleeper, on_progress=lambda c, t: progress.append((c, t))).recover(store)
        
        assert progress == [(1, 4), (2, 4), (3, 4), (4, 4)]
    
    def test_explicit_max_sequence_bounds_scan(self, sleeper):
        store = _store(1, 6)
        feed = FakeFeed()
        
        tally = _engine(feed, sleeper).recover(store, max_sequence=3)
        
        assert tally.missing == 2
    
    def test_recovered_record_logged_with_symbol(self, sleeper, caplog):
        store = _store(1, 3)
        feed = FakeFeed(resend={2: make_record(2, symbol="TSLA")})
        
        _engine(feed, sleeper).recover(store)
        
        assert "Data recovered | sequence=2 | symbol=TSLA" in caplog.text


class TestHighSequenceLimitation:
    """Re-send parameters are one byte; larger sequences are truncated."""
    
    def test_sequence_300_requests_44(self, sleeper, caplog):
        store = _store(*[s for s in range(1, 302) if s != 300])
        # The server answers parameter 44 with the record for sequence 44
        feed = FakeFeed(resend={44: make_record(44)})
        
        tally = _engine(feed, sleeper).recover(store)
        
        assert feed.requests == [bytes([2, 44])]
        assert tally.missing == 1
        assert tally.recovered == 1
        assert not store.contains(300)
        assert "truncated value | sequence=300 | requested=44" in caplog.text
    
    def test_sequence_255_is_not_truncated(self, sleeper, caplog):
        store = _store(*[s for s in range(1, 257) if s != 255])
        feed = FakeFeed(resend={255: make_record(255)})
        
        tally = _engine(feed, sleeper).recover(store)
        
        assert feed.requests == [b"\x02\xff"]
        assert store.contains(255)
        assert tally.complete
        assert "truncated" not in caplog.text


class TestRecoveryTally:
    
    @pytest.mark.parametrize("missing,recovered,rate", [(0, 0, 100.0), (4, 1, 25.0), (2, 2, 100.0)])
    def test_success_rate(self, missing, recovered, rate):
        from abx_feed.core.types import RecoveryTally
        tally = RecoveryTally(missing=missing, recovered=recovered)
        assert tally.success_rate == rate
        assert tally.failed == missing - recovered
