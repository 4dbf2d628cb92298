"""Protocol constants and enumerations for the feed client.

This module defines the wire sizes, opcodes, session states and default
values used throughout the feed client.
"""

from enum import Enum, IntEnum


# ============================================================================
# Enumerations
# ============================================================================

class Opcode(IntEnum):
    """Request opcodes understood by the feed server.
    
    - STREAM_ALL: Send every available record, then close
    - RESEND: Send the single record named by the parameter byte, then close
    """
    STREAM_ALL = 1
    RESEND = 2


class SessionState(str, Enum):
    """States of one end-to-end client run.
    
    The run moves strictly forward through CONNECTING, STREAMING, GAP_SCAN,
    BACKFILLING, SORTING, EXPORTING and DONE. ABORTED is reachable only from
    CONNECTING, when the initial connect fails.
    """
    CONNECTING = "CONNECTING"
    STREAMING = "STREAMING"
    GAP_SCAN = "GAP_SCAN"
    BACKFILLING = "BACKFILLING"
    SORTING = "SORTING"
    EXPORTING = "EXPORTING"
    DONE = "DONE"
    ABORTED = "ABORTED"


class ExportFormat(str, Enum):
    """Output formats supported by the record exporter."""
    JSON = "json"
    CSV = "csv"


# ============================================================================
# Wire Format
# ============================================================================

# Request: opcode byte + parameter byte
REQUEST_SIZE = 2

# Record: symbol(4) side(1) size(4) price(4) sequence(4), big-endian
RECORD_SIZE = 17
SYMBOL_SIZE = 4

# The re-send parameter is one unsigned byte
MAX_RESEND_SEQUENCE = 0xFF

# Symbol and side bytes are opaque; latin-1 maps every byte to one character
TEXT_ENCODING = "latin-1"


# ============================================================================
# Defaults
# ============================================================================

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_BACKFILL_DELAY_MS = 100
DEFAULT_OUTPUT_FILE = "output.json"
DEFAULT_LOG_LEVEL = "INFO"
PROGRESS_BAR_WIDTH = 50

# Column names in exported files, in wire order
EXPORT_COLUMNS = ("assetCode", "orderDirection", "size", "cost", "sequenceNum")
