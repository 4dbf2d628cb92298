"""Exception hierarchy for the feed client.

This module defines all custom exceptions used throughout the feed client.
All exceptions inherit from FeedClientError for easy catching and handling.

Transport errors are never allowed to cross a phase boundary: the phase that
sees one converts it into an end-of-stream event or a failed-recovery tally.
"""

from typing import Any, Dict


class FeedClientError(Exception):
    """Base exception for all feed client errors.
    
    All custom exceptions in the feed client inherit from this class,
    allowing for easy catching of any feed client related errors.
    """
    
    def __init__(self, message: str, **context: Any):
        """Initialize the exception with a message and optional context.
        
        Args:
            message: Error message describing what went wrong
            **context: Additional context information for logging and debugging
        """
        super().__init__(message)
        self.context: Dict[str, Any] = context
    
    def __str__(self) -> str:
        """Return string representation including context."""
        if self.context:
            ctx = ', '.join(f'{k}={v}' for k, v in self.context.items())
            return f"{super().__str__()} [{ctx}]"
        return super().__str__()


# ============================================================================
# Configuration Exceptions
# ============================================================================

class InvalidConfigError(FeedClientError):
    """Raised when configuration contains invalid values.
    
    Examples are a port outside 1-65535, a negative backfill delay or an
    unknown export format.
    """


class MissingConfigError(FeedClientError):
    """Raised when a configuration file or required key is missing."""


# ============================================================================
# Transport Exceptions
# ============================================================================

class TransportError(FeedClientError):
    """Base class for transport-related errors.
    
    Orderly closure by the remote end is not an error and never raises
    one of these; it is reported as "no more data" instead.
    """


class FeedConnectionError(TransportError):
    """Raised when a connection to the feed cannot be established.
    
    Named FeedConnectionError to avoid conflict with built-in ConnectionError.
    Fatal only for the initial connect; during backfill it skips one sequence.
    """


class SendError(TransportError):
    """Raised when an outbound request could not be written.
    
    Callers log it and still attempt the following read.
    """


class ReceiveError(TransportError):
    """Raised when an inbound read fails for a reason other than closure.
    
    Ends the streaming phase, or counts as an unrecovered sequence during
    backfill.
    """


# ============================================================================
# Codec Exceptions
# ============================================================================

class CodecError(FeedClientError):
    """Raised when a message cannot be encoded or decoded.
    
    Only raised for malformed arguments (wrong buffer length, unknown
    opcode). Any complete 17-byte buffer decodes to some record.
    """


# ============================================================================
# Export Exceptions
# ============================================================================

class ExportError(FeedClientError):
    """Raised when the final dataset cannot be written."""
