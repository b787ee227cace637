"""Find and terminate development servers bound to local TCP ports."""

from .port_range import PortRange, parse_port_tokens
from .port_resolver import PortResolver
from .process_models import ProcessHandle, TerminationOutcome
from .terminator import Terminator

__version__ = "1.0.0"

__all__ = [
    "PortRange",
    "PortResolver",
    "ProcessHandle",
    "TerminationOutcome",
    "Terminator",
    "parse_port_tokens",
]
