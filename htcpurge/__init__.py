"""
htcpurge - HTCP cache purger

Sends HTCP CLR requests to reverse-proxy caches over UDP so that cached
entries for a URL are invalidated across a cache fleet.

This package contains:
- packet/    : HTCP CLR wire format and transaction ids
- routing/   : URL to cache endpoint route rules
- transport/ : UDP socket lifecycle
- purger.py  : HTCPPurger, the bind/purge/close front end
- config.py  : TOML configuration
"""

__version__ = "0.1.0"
__author__ = "htcp-purge contributors"

from .config import ConfigError, PurgerConfig, RouteConfig
from .packet import EncodingError, TransactionCounter, encode_clr
from .routing import Destination, RouteResolver, RouteRule
from .transport import TransportError
from .purger import HTCPPurger, PurgeResult, PurgeStatus

__all__ = [
    'HTCPPurger',
    'PurgeResult',
    'PurgeStatus',
    'PurgerConfig',
    'RouteConfig',
    'RouteResolver',
    'RouteRule',
    'Destination',
    'TransactionCounter',
    'encode_clr',
    'ConfigError',
    'EncodingError',
    'TransportError',
]
