#!/usr/bin/env python3
"""
Speedcheck CLI -- latency, jitter, download and upload from the terminal.

Usage::

    python speedcheck.py                    # rich dashboard
    python speedcheck.py --simple           # plain text
    python speedcheck.py --json             # JSON to stdout
    python speedcheck.py --max-time 30      # cancel after 30 seconds
    python speedcheck.py --show-config      # print effective config
    python speedcheck.py --set request_timeout=5
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, Optional, Tuple

from engine.cancel import CancelToken
from engine.config import DEFAULTS, coerce_value, config_path, load_config, set_config_value
from engine.constants import MAX_REQUEST_TIMEOUT, MAX_RUN_TIME, MIN_REQUEST_TIMEOUT
from engine.controller import PhaseController
from ui.dashboard import (
    ProgressDisplay,
    console,
    print_final_results,
    print_header,
    print_network_info,
)
from ui.logging_setup import configure_logging
from ui.output import create_result_json, format_text_result


# ---------------------------------------------------------------------------
# Parameter validation
# ---------------------------------------------------------------------------

def _validate(request_timeout: float, max_time: Optional[float]) -> None:
    """Raise ``ValueError`` if any parameter is out of range."""
    if not MIN_REQUEST_TIMEOUT <= request_timeout <= MAX_REQUEST_TIMEOUT:
        raise ValueError(
            f"Timeout must be between {MIN_REQUEST_TIMEOUT} and {MAX_REQUEST_TIMEOUT} s"
        )
    if max_time is not None and not 0 < max_time <= MAX_RUN_TIME:
        raise ValueError(f"Max time must be greater than 0 and at most {MAX_RUN_TIME} s")


def _parse_assignment(text: str) -> Tuple[str, Any]:
    """Split ``KEY=VALUE`` and coerce VALUE to the key's configured type."""
    key, sep, raw = text.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"Expected KEY=VALUE, got {text!r}")
    if key not in DEFAULTS:
        raise ValueError(f"Unknown config key {key!r} (known: {', '.join(sorted(DEFAULTS))})")
    return key, coerce_value(key, raw)


# ---------------------------------------------------------------------------
# Core test runner
# ---------------------------------------------------------------------------

async def run_speedcheck(
    *,
    config: Dict[str, Any],
    json_output: bool = False,
    simple: bool = False,
    max_time: Optional[float] = None,
) -> Dict[str, Any]:
    """Execute one measurement session and return a JSON-serialisable dict."""

    show_ui = not json_output and not simple

    if show_ui:
        print_header()

    token = CancelToken()
    deadline = None
    if max_time is not None:
        deadline = asyncio.get_running_loop().call_later(max_time, token.cancel)

    try:
        async with PhaseController(
            ping_url=config["ping_url"],
            download_url=config["download_url"],
            network_info_url=config["network_info_url"],
            request_timeout=float(config["request_timeout"]),
        ) as controller:
            session = controller.open_session(lookup_network_info=bool(config["network_info"]))

            display = None
            if show_ui:
                display = ProgressDisplay()
                controller.on_update = display

            try:
                await controller.run_test(session, token)
            finally:
                if display is not None:
                    display.stop()

            await controller.wait_network_info()
    finally:
        if deadline is not None:
            deadline.cancel()

    result_json = create_result_json(session)

    if show_ui:
        print_network_info(session.network_info)
        print_final_results(session)
    elif simple:
        print(format_text_result(session))
    else:
        print(json.dumps(result_json, indent=2))

    return result_json


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(
        description="Speedcheck CLI -- Internet speed test",
    )
    # Output modes
    parser.add_argument("--json", "-j", action="store_true", help="Output results as JSON")
    parser.add_argument("--simple", "-s", action="store_true", help="Simple output mode (no dashboard)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine activity to stderr")

    # Test parameters
    parser.add_argument("--timeout", type=float, metavar="SECS", help="Per-request timeout (default: from config, 10)")
    parser.add_argument("--max-time", type=float, metavar="SECS", help="Cancel the test after this many seconds")
    parser.add_argument("--no-network-info", action="store_true", help="Skip the IP / ISP lookup")

    # Configuration
    parser.add_argument("--show-config", action="store_true", help="Print effective configuration and exit")
    parser.add_argument("--set", metavar="KEY=VALUE", action="append", default=[], help="Persist a config value and exit")

    args = parser.parse_args()

    configure_logging("DEBUG" if args.verbose else "WARNING")

    # Config mode
    if args.set:
        try:
            for item in args.set:
                key, value = _parse_assignment(item)
                path = set_config_value(key, value)
                console.print(f"[green]{key}[/green] = {value!r}")
        except (ValueError, KeyError) as exc:
            console.print(f"[red]Error: {exc}[/red]")
            sys.exit(1)
        console.print(f"[dim]Saved to {path}[/dim]")
        return

    config = load_config()
    if args.timeout is not None:
        config["request_timeout"] = args.timeout
    if args.no_network_info:
        config["network_info"] = False

    if args.show_config:
        console.print(f"[dim]{config_path()}[/dim]")
        for key in sorted(config):
            console.print(f"  {key} = {config[key]!r}")
        return

    # Validate
    try:
        _validate(float(config["request_timeout"]), args.max_time)
    except (TypeError, ValueError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    try:
        asyncio.run(
            run_speedcheck(
                config=config,
                json_output=args.json,
                simple=args.simple,
                max_time=args.max_time,
            )
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Test cancelled by user[/yellow]")
        sys.exit(1)
    except Exception as exc:
        console.print(f"\n[red]Error: {exc}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
