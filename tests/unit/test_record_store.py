"""
Unit tests for the record store.
"""

from abx_feed.data.record_store import RecordStore

from feed_fakes import make_record


class TestRecordStore:
    
    def test_empty_store(self):
        store = RecordStore()
        assert len(store) == 0
        assert store.max_sequence() == 0
        assert store.sorted_by_sequence() == []
        assert not store.contains(1)
    
    def test_add_tracks_membership_and_max(self):
        store = RecordStore()
        for seq in (4, 1, 9, 2):
            store.add(make_record(seq))
        
        assert len(store) == 4
        assert store.max_sequence() == 9
        assert store.contains(4)
        assert not store.contains(3)
        assert 9 in store
        assert store.sequences == {1, 2, 4, 9}
    
    def test_duplicate_sequence_kept_in_list_once_in_set(self):
        """Membership is by sequence; the list keeps every arrival."""
        store = RecordStore()
        store.add(make_record(1, symbol="AAAA"))
        store.add(make_record(1, symbol="BBBB"))
        
        assert len(store) == 2
        assert store.sequences == {1}
    
    def test_sorted_by_sequence_is_stable(self):
        store = RecordStore()
        store.add(make_record(3))
        store.add(make_record(2, symbol="FRST"))
        store.add(make_record(1))
        store.add(make_record(2, symbol="SCND"))
        
        ordered = store.sorted_by_sequence()
        
        assert [r.sequence for r in ordered] == [1, 2, 2, 3]
        assert [r.symbol for r in ordered if r.sequence == 2] == ["FRST", "SCND"]
    
    def test_sorting_does_not_reorder_store(self):
        store = RecordStore()
        store.add(make_record(2))
        store.add(make_record(1))
        store.sorted_by_sequence()
        
        assert [r.sequence for r in store] == [2, 1]
    
    def test_sequences_view_is_read_only_snapshot(self):
        store = RecordStore()
        store.add(make_record(1))
        view = store.sequences
        store.add(make_record(2))
        
        assert view == {1}
        assert not hasattr(view, "add")
