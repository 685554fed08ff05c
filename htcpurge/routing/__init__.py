"""
Purge Routing Module

Selects the cache endpoint that receives the CLR request for a URL.
"""

from .rules import (
    Destination,
    RouteRule,
    RouteResolver,
    AlwaysMatch,
    PatternMatch,
    compile_matcher,
)

__all__ = [
    'Destination',
    'RouteRule',
    'RouteResolver',
    'AlwaysMatch',
    'PatternMatch',
    'compile_matcher',
]
