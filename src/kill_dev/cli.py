"""
kill-dev command line entry point.

Scans ports for dev servers, lets the operator pick which ones to stop and
terminates them with escalating signals.

Usage:
    kill-dev                   # default Next.js/React and Vite ports
    kill-dev 3000 8000-8010    # explicit ports and ranges
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from .config import ConfigurationError, Settings, load_settings
from .errors import PromptUnavailableError
from .logging_config import setup_logging
from .port_range import resolve_target_ports
from .port_resolver import PortResolver
from .process_models import ProcessHandle
from .prompt import select_processes
from .terminator import Terminator
from .user_display import UserDisplay

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

Selector = Callable[[Sequence[ProcessHandle]], List[ProcessHandle]]


def build_parser() -> argparse.ArgumentParser:
    # -h is handled here so the banner help replaces argparse's usage text
    parser = argparse.ArgumentParser(prog="kill-dev", add_help=False)
    parser.add_argument("ports", nargs="*", help="Single port (3000) or port range (3000-3005)")
    parser.add_argument("-h", "--help", action="store_true", dest="show_help")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--parallel", action="store_true")
    return parser


def _run_scan(
    argv: Optional[Sequence[str]],
    *,
    settings: Optional[Settings],
    display: UserDisplay,
    resolver: Optional[PortResolver],
    terminator: Optional[Terminator],
    selector: Selector,
) -> int:
    args, extras = build_parser().parse_known_args(argv)
    settings = settings or load_settings()
    setup_logging(logging.DEBUG if args.verbose else settings.log_level, settings.log_file)

    if args.show_help:
        display.show_help(settings.default_port_tokens)
        return EXIT_OK

    # Unknown options are kept as tokens so they are reported like any other bad port
    tokens = [*args.ports, *extras]
    port_range = resolve_target_ports(tokens, settings.default_port_tokens)
    display.show_invalid_tokens(port_range.rejected_tokens)
    if not port_range:
        if not tokens:
            raise ConfigurationError.invalid_value("KILL_DEV_DEFAULT_PORTS", settings.default_port_tokens, "No valid ports")
        display.show_no_valid_ports()
        display.show_help(settings.default_port_tokens)
        return EXIT_OK

    resolver = resolver or PortResolver(lookup_timeout=settings.lookup_timeout_seconds)
    display.show_scan_start(port_range.ports)
    active = asyncio.run(resolver.resolve_many(port_range))
    logger.info("Found %d active process(es) across %d port(s)", len(active), len(port_range))
    if not active:
        display.show_no_processes()
        return EXIT_OK

    try:
        selected = selector(active)
    except PromptUnavailableError as exc:
        logger.info("Prompt unavailable: %s", exc)
        display.show_prompt_unavailable()
        return EXIT_OK

    if not selected:
        display.show_none_selected()
        return EXIT_OK
    logger.info("Selected for termination: %s", ", ".join(handle.label for handle in selected))

    terminator = terminator or Terminator(port_probe=resolver.is_port_bound_async, wait_seconds=settings.signal_wait_seconds)
    display.show_termination_start()
    asyncio.run(
        terminator.terminate_many(
            selected,
            concurrent=args.parallel or settings.parallel,
            on_start=display.show_terminating,
            on_outcome=display.show_outcome,
        )
    )
    display.show_summary()
    return EXIT_OK


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    settings: Optional[Settings] = None,
    display: Optional[UserDisplay] = None,
    resolver: Optional[PortResolver] = None,
    terminator: Optional[Terminator] = None,
    selector: Selector = select_processes,
) -> int:
    """Run kill-dev and return the process exit status."""
    display = display or UserDisplay()
    try:
        return _run_scan(argv, settings=settings, display=display, resolver=resolver, terminator=terminator, selector=selector)
    except KeyboardInterrupt:
        logger.info("Interrupted by operator")
        return EXIT_INTERRUPTED
    except Exception as exc:  # top-level boundary: report anything unclassified and exit non-zero
        logger.exception("Unhandled error in kill-dev")
        display.show_critical_error(exc)
        return EXIT_FAILURE


def run() -> None:
    """Console-script entry point."""
    raise SystemExit(main())


__all__ = ["build_parser", "main", "run"]
