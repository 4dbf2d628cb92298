"""
Record Exporter - Writes the final ordered dataset to disk.

Supports a JSON array of objects (default) and CSV.
"""

from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from ..core.constants import ExportFormat, EXPORT_COLUMNS, DEFAULT_OUTPUT_FILE
from ..core.exceptions import ExportError
from ..core.types import ProgressCallback, Record
from .logger import get_logger


def records_to_frame(
    records: Sequence[Record],
    on_progress: Optional[ProgressCallback] = None
) -> pd.DataFrame:
    """
    Build a DataFrame with one row per record, columns in wire order.
    
    Symbols are written without their NUL padding. ``on_progress`` is
    called as ``(rows_done, total)`` after each row.
    """
    rows = []
    total = len(records)
    for i, record in enumerate(records, start=1):
        rows.append(record.to_dict())
        if on_progress:
            on_progress(i, total)
    
    return pd.DataFrame(rows, columns=list(EXPORT_COLUMNS))


class RecordExporter:
    """
    Serialize records sorted by sequence to a file.
    
    The exporter only accepts input already in ascending sequence order;
    it never reorders or builds records itself.
    """
    
    def __init__(
        self,
        output_file: str = DEFAULT_OUTPUT_FILE,
        fmt: ExportFormat = ExportFormat.JSON,
        on_progress: Optional[ProgressCallback] = None
    ):
        """
        Initialize exporter.
        
        Args:
            output_file: Destination path
            fmt: ExportFormat.JSON or ExportFormat.CSV
            on_progress: Optional per-row callback receiving (done, total)
        """
        self.output_file = Path(output_file)
        self.fmt = ExportFormat(fmt)
        self.on_progress = on_progress
        
        self.logger = get_logger(__name__)
    
    def export(self, records: List[Record]) -> Path:
        """
        Write ``records`` to the output file.
        
        Returns:
            Path written
        
        Raises:
            ExportError if records are out of order or the write fails
        """
        for prev, cur in zip(records, records[1:]):
            if cur.sequence < prev.sequence:
                raise ExportError(
                    "Records are not sorted by sequence",
                    previous=prev.sequence,
                    current=cur.sequence
                )
        
        self.logger.info(f"Writing data to '{self.output_file}'", records=len(records), format=self.fmt.value)
        
        df = records_to_frame(records, self.on_progress)
        
        try:
            self.output_file.parent.mkdir(parents=True, exist_ok=True)
            if self.fmt == ExportFormat.CSV:
                df.to_csv(self.output_file, index=False)
            else:
                df.to_json(self.output_file, orient='records', indent=4, force_ascii=False)
        except OSError as e:
            raise ExportError(f"Failed to write export file: {e}", path=str(self.output_file))
        
        self.logger.info("Data export completed", path=str(self.output_file))
        return self.output_file
