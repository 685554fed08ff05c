"""
Purge Route Rules

Maps a URL to the cache endpoint its CLR request must be sent to.

Design:
- Rules are checked in the order they were configured
- First matching rule wins
- A pattern written as /regex/ is compiled once when the resolver is built
- Any other pattern, or none at all, matches every URL (catch-all)
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Optional, Tuple

from ..config import ConfigError


# /body/ with a non-empty body, no newlines
_REGEX_SENTINEL = re.compile(r"/.+/")


class Destination(NamedTuple):
    """Resolved cache endpoint."""
    host: str
    port: int


class AlwaysMatch:
    """Matcher for rules without a regex pattern."""

    __slots__ = ()

    def __call__(self, identifier: str) -> bool:
        return True

    def __repr__(self) -> str:
        return "AlwaysMatch()"


class PatternMatch:
    """Matcher that searches the URL with a compiled regex."""

    __slots__ = ("regex",)

    def __init__(self, regex: re.Pattern):
        self.regex = regex

    def __call__(self, identifier: str) -> bool:
        return self.regex.search(identifier) is not None

    def __repr__(self) -> str:
        return f"PatternMatch({self.regex.pattern!r})"


def compile_matcher(pattern: Optional[str]):
    """
    Build the matcher for a configured pattern.

    Args:
        pattern: "/regex/" for a regex rule, anything else for catch-all

    Returns:
        AlwaysMatch or PatternMatch

    Raises:
        ConfigError: If the regex body does not compile
    """
    if not isinstance(pattern, str) or not _REGEX_SENTINEL.fullmatch(pattern):
        return AlwaysMatch()

    body = pattern[1:-1]
    try:
        return PatternMatch(re.compile(body))
    except re.error as e:
        raise ConfigError(f"Invalid route pattern {pattern!r}: {e}") from e


@dataclass(frozen=True)
class RouteRule:
    """
    A single route: URLs accepted by ``pattern`` go to ``host:port``.
    """
    host: str
    port: int
    pattern: Optional[str] = None

    @property
    def destination(self) -> Destination:
        return Destination(self.host, self.port)


class RouteResolver:
    """
    Ordered first-match URL router.

    Usage:
        resolver = RouteResolver([
            RouteRule("10.0.0.1", 4827, pattern=r"/https?:\\/\\/upload\\./"),
            RouteRule("10.0.0.2", 4827),
        ])

        dest = resolver.resolve("http://upload.example.org/a.png")
        if dest is None:
            # no rule matched
            ...
    """

    def __init__(self, rules: Iterable[RouteRule]):
        """
        Build the resolver and compile every pattern.

        Raises:
            ConfigError: If no rules are given or a pattern is invalid
        """
        self._rules: Tuple[RouteRule, ...] = tuple(rules)
        if not self._rules:
            raise ConfigError("At least one route must be specified")

        self._matchers = tuple(
            (compile_matcher(rule.pattern), rule.destination)
            for rule in self._rules
        )

    @property
    def rules(self) -> List[RouteRule]:
        return list(self._rules)

    def resolve(self, identifier: str) -> Optional[Destination]:
        """
        Find the endpoint for a URL.

        Returns:
            Destination of the first matching rule, or None
        """
        for matcher, destination in self._matchers:
            if matcher(identifier):
                return destination
        return None

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"<RouteResolver rules={len(self._rules)}>"
