"""
HTCP CLR Wire Format

Builds HTCP (RFC 2756) CLR requests used to purge a URL from a cache.

Packet Structure (all integers big-endian):
    Header (4 bytes):
        length        (2 bytes) - Total packet length
        major/minor   (2 bytes) - Protocol version, always 0
    Data:
        length        (2 bytes) - Data section length
        opcode        (1 byte)  - 4 (CLR), response nibble 0
        flags         (1 byte)  - Reserved, always 0
        trans_id      (4 bytes) - Transaction id
        CLR specifier:
            reason    (2 bytes) - Reserved & reason, always 0
            method    (COUNTSTR) - "HEAD"
            uri       (COUNTSTR) - URL bytes, not percent-encoded
            version   (COUNTSTR) - "HTTP/1.0"
            headers   (COUNTSTR) - Empty, padding only
    Auth:
        length        (2 bytes) - Always 2 (no signature)

A COUNTSTR is a 2-byte length followed by that many bytes.
"""

import struct
from dataclasses import dataclass
from typing import Union


# Opcode for CLR requests
OP_CLR = 4

# Request line pieces. HEAD and GET are equivalent for a purge.
CLR_METHOD = b"HEAD"
CLR_VERSION = b"HTTP/1.0"

# Auth section length when no signature is sent
AUTH_EMPTY_LENGTH = 2

# Fixed field layouts
_HEADER_FMT = ">HHHBBIHH4sH"   # up to and including the URI length
_TRAILER_FMT = ">H8sHH"        # version COUNTSTR, headers length, auth length
HEADER_SIZE = struct.calcsize(_HEADER_FMT)      # 22
TRAILER_SIZE = struct.calcsize(_TRAILER_FMT)    # 14

MAX_FIELD_VALUE = 0xFFFF
MAX_TRANSACTION_ID = 0xFFFFFFFF

# Everything in the packet that is not the URI
PACKET_OVERHEAD = HEADER_SIZE + TRAILER_SIZE    # 36

# Longest URI whose packet length still fits in 16 bits
MAX_URI_LENGTH = MAX_FIELD_VALUE - PACKET_OVERHEAD


class EncodingError(ValueError):
    """Raised when a CLR request cannot be represented on the wire."""
    pass


def specifier_length(uri_len: int) -> int:
    """Length of the CLR specifier for a URI of ``uri_len`` bytes."""
    return 2 + 4 + 2 + uri_len + 2 + 8 + 2


def data_length(uri_len: int) -> int:
    """Length of the DATA section (op data plus its 8-byte prefix)."""
    return 8 + 2 + specifier_length(uri_len)


def total_length(uri_len: int) -> int:
    """Total packet length including the header and empty auth section."""
    return 4 + data_length(uri_len) + 2


def check_uri(identifier: Union[str, bytes]) -> bytes:
    """
    Return the wire bytes of a URL, checking that they fit a CLR request.

    Raises:
        EncodingError: If the packet length would overflow 16 bits
    """
    if isinstance(identifier, (bytes, bytearray)):
        uri = bytes(identifier)
    else:
        uri = identifier.encode("utf-8")

    if len(uri) > MAX_URI_LENGTH:
        raise EncodingError(
            f"URI too long: {len(uri)} > {MAX_URI_LENGTH} bytes"
        )
    return uri


def encode_clr(identifier: Union[str, bytes], transaction_id: int) -> bytes:
    """
    Encode an HTCP CLR request for a URL.

    Args:
        identifier: URL to purge; str is UTF-8 encoded, bytes are sent as-is
        transaction_id: Transaction id to place in the header

    Returns:
        Packet bytes ready to be sent as one datagram

    Raises:
        EncodingError: If the URL is too long for the 16-bit length fields
            or the transaction id does not fit in 32 bits
    """
    uri = check_uri(identifier)
    uri_len = len(uri)

    if transaction_id < 0 or transaction_id > MAX_TRANSACTION_ID:
        raise EncodingError(f"Invalid transaction id: {transaction_id}")

    header = struct.pack(
        _HEADER_FMT,
        total_length(uri_len),
        0,
        data_length(uri_len),
        OP_CLR,
        0,
        transaction_id,
        0,
        len(CLR_METHOD),
        CLR_METHOD,
        uri_len,
    )
    trailer = struct.pack(
        _TRAILER_FMT,
        len(CLR_VERSION),
        CLR_VERSION,
        0,
        AUTH_EMPTY_LENGTH,
    )
    return header + uri + trailer


@dataclass(frozen=True)
class CLRHeader:
    """
    Fixed fields of an encoded CLR request.

    Only requests produced by encode_clr() are understood; this is not a
    general HTCP parser.
    """
    length: int
    version: int
    data_length: int
    opcode: int
    flags: int
    transaction_id: int
    reason: int
    method: bytes
    uri: bytes
    protocol: bytes
    headers_length: int
    auth_length: int

    @classmethod
    def from_bytes(cls, data: bytes) -> 'CLRHeader':
        """Parse a CLR request built by encode_clr()."""
        if len(data) < PACKET_OVERHEAD:
            raise EncodingError(f"Packet too short: {len(data)} < {PACKET_OVERHEAD}")

        (length, version, data_len, opcode, flags, transaction_id,
         reason, method_len, method, uri_len) = struct.unpack(
            _HEADER_FMT,
            data[:HEADER_SIZE],
        )

        if method_len != len(CLR_METHOD):
            raise EncodingError(f"Unexpected method length: {method_len}")

        if length != len(data) or length != total_length(uri_len):
            raise EncodingError(
                f"Length mismatch: header says {length}, got {len(data)} bytes"
            )

        uri = data[HEADER_SIZE:HEADER_SIZE + uri_len]
        version_len, protocol, headers_length, auth_length = struct.unpack(
            _TRAILER_FMT,
            data[HEADER_SIZE + uri_len:],
        )

        return cls(
            length=length,
            version=version,
            data_length=data_len,
            opcode=opcode,
            flags=flags,
            transaction_id=transaction_id,
            reason=reason,
            method=method,
            uri=uri,
            protocol=protocol[:version_len],
            headers_length=headers_length,
            auth_length=auth_length,
        )
