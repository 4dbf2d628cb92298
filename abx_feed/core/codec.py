"""
Wire Codec - Binary encoding of requests and records.

Requests are 2 bytes: opcode, then a parameter byte holding the target
sequence number truncated to 8 bits. Records are 17 bytes with all integers
in network byte order:

    offset  size  field
    0       4     symbol
    4       1     side
    5       4     size      (signed)
    9       4     price     (signed)
    13      4     sequence  (signed)

The re-send parameter cannot represent sequences above 255; such requests
ask the server for ``sequence % 256`` instead.
"""

import struct

from .constants import (
    Opcode, RECORD_SIZE, SYMBOL_SIZE,
    MAX_RESEND_SEQUENCE, TEXT_ENCODING
)
from .exceptions import CodecError
from .types import Record


_REQUEST = struct.Struct(">BB")
_RECORD = struct.Struct(">4sciii")


def truncate_sequence(sequence: int) -> int:
    """Return the parameter byte actually sent when requesting ``sequence``."""
    return sequence & MAX_RESEND_SEQUENCE


def encode_request(opcode: int, sequence_param: int = 0) -> bytes:
    """
    Encode a 2-byte command.
    
    Args:
        opcode: Opcode.STREAM_ALL or Opcode.RESEND
        sequence_param: Target sequence (0 for STREAM_ALL); truncated to 8 bits
    
    Returns:
        The request bytes
    
    Raises:
        CodecError if the opcode is unknown
    """
    try:
        op = Opcode(opcode)
    except ValueError:
        raise CodecError(f"Unknown opcode: {opcode}", opcode=opcode)
    
    return _REQUEST.pack(int(op), truncate_sequence(sequence_param))


def decode_record(data: bytes) -> Record:
    """
    Decode one 17-byte record.
    
    Any complete buffer decodes; field values are not checked for
    plausibility.
    
    Raises:
        CodecError if the buffer is not exactly 17 bytes
    """
    if len(data) != RECORD_SIZE:
        raise CodecError(
            f"Record must be {RECORD_SIZE} bytes, got {len(data)}",
            length=len(data)
        )
    
    symbol, side, size, price, sequence = _RECORD.unpack(data)
    return Record(
        symbol=symbol.decode(TEXT_ENCODING),
        side=side.decode(TEXT_ENCODING),
        size=size,
        price=price,
        sequence=sequence,
    )


def encode_record(record: Record) -> bytes:
    """
    Encode a record into its 17-byte wire form.
    
    Used by feed simulators and tests; the client itself only decodes.
    
    Raises:
        CodecError if a field does not fit its wire slot
    """
    try:
        symbol = record.symbol.encode(TEXT_ENCODING)
        side = record.side.encode(TEXT_ENCODING)
    except UnicodeEncodeError as e:
        raise CodecError(f"Record text not encodable: {e}", sequence=record.sequence)
    
    if len(symbol) != SYMBOL_SIZE:
        raise CodecError(
            f"Symbol must be {SYMBOL_SIZE} characters, got {len(symbol)}",
            symbol=record.symbol
        )
    if len(side) != 1:
        raise CodecError("Side must be a single character", side=record.side)
    
    try:
        return _RECORD.pack(symbol, side, record.size, record.price, record.sequence)
    except struct.error as e:
        raise CodecError(f"Record field out of range: {e}", sequence=record.sequence)
