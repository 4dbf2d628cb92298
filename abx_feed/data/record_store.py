"""
Record Store - Accumulates received records for one run.
"""

from typing import AbstractSet, Iterator, List, Set

from ..core.types import Record


class RecordStore:
    """
    Append-only record list plus a membership set of sequence numbers.
    
    The set answers "has this sequence been seen" in O(1). The list keeps
    every record in arrival order, so a sequence delivered twice is stored
    twice while appearing once in the set.
    """
    
    def __init__(self):
        self._records: List[Record] = []
        self._sequences: Set[int] = set()
        self._max_sequence = 0
    
    def add(self, record: Record) -> None:
        """Append a record and mark its sequence as seen."""
        self._records.append(record)
        self._sequences.add(record.sequence)
        if record.sequence > self._max_sequence:
            self._max_sequence = record.sequence
    
    def max_sequence(self) -> int:
        """Largest sequence stored, or 0 if empty."""
        return self._max_sequence
    
    def contains(self, sequence: int) -> bool:
        return sequence in self._sequences
    
    @property
    def sequences(self) -> AbstractSet[int]:
        """Read-only view of the sequences seen so far."""
        return frozenset(self._sequences)
    
    def sorted_by_sequence(self) -> List[Record]:
        """Records in stable ascending sequence order."""
        return sorted(self._records, key=lambda r: r.sequence)
    
    def __len__(self) -> int:
        return len(self._records)
    
    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records))
    
    def __contains__(self, sequence: object) -> bool:
        return sequence in self._sequences
