"""
Port token parsing.

Turns command-line tokens such as ``3000`` or ``3000-3005`` into a validated,
duplicate-free, insertion-ordered collection of ports. Bad tokens are
reported back to the caller instead of aborting the parse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Sequence

from .process_models import MAX_PORT, MIN_PORT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortRange:
    """Unique ports in the order they were first requested."""

    ports: tuple[int, ...] = ()
    rejected_tokens: tuple[str, ...] = field(default=())

    def __iter__(self) -> Iterator[int]:
        return iter(self.ports)

    def __len__(self) -> int:
        return len(self.ports)


def _parse_port(text: str) -> Optional[int]:
    stripped = text.strip()
    if not (stripped.isascii() and stripped.isdigit()):
        return None
    value = int(stripped)
    if not MIN_PORT <= value <= MAX_PORT:
        return None
    return value


def expand_token(token: str) -> Optional[range]:
    """Return the inclusive port range a token denotes, or ``None`` if invalid."""
    if "-" in token:
        start_text, _, end_text = token.partition("-")
        start = _parse_port(start_text)
        end = _parse_port(end_text)
        if start is None or end is None or start > end:
            return None
        return range(start, end + 1)

    port = _parse_port(token)
    if port is None:
        return None
    return range(port, port + 1)


def parse_port_tokens(tokens: Iterable[str]) -> PortRange:
    """Expand tokens into a :class:`PortRange`, skipping invalid ones with a warning."""
    seen: dict[int, None] = {}
    rejected: list[str] = []
    for token in tokens:
        expanded = expand_token(token)
        if expanded is None:
            logger.warning("Invalid port or range %r; skipping", token)
            rejected.append(token)
            continue
        for port in expanded:
            seen.setdefault(port, None)
    return PortRange(ports=tuple(seen), rejected_tokens=tuple(rejected))


def resolve_target_ports(args: Sequence[str], default_tokens: Sequence[str]) -> PortRange:
    """Parse user tokens, or the configured defaults when none were given."""
    if not args:
        return parse_port_tokens(default_tokens)
    return parse_port_tokens(args)


__all__ = ["PortRange", "expand_token", "parse_port_tokens", "resolve_target_ports"]
