"""
HTCP Packet Module

Wire format for HTCP CLR requests and transaction id allocation.
"""

from .htcp import (
    CLRHeader,
    EncodingError,
    encode_clr,
    check_uri,
    total_length,
    data_length,
    specifier_length,
    MAX_URI_LENGTH,
    OP_CLR,
)

from .sequence import (
    TransactionCounter,
)

__all__ = [
    # Wire format
    'CLRHeader',
    'EncodingError',
    'encode_clr',
    'check_uri',
    'total_length',
    'data_length',
    'specifier_length',
    'MAX_URI_LENGTH',
    'OP_CLR',
    # Transaction ids
    'TransactionCounter',
]
