"""UI layer -- Rich dashboard and output formatters."""

from .dashboard import (
    ProgressDisplay,
    console,
    print_final_results,
    print_header,
    print_network_info,
)
from .logging_setup import configure_logging
from .output import create_result_json, format_text_result

__all__ = [
    "ProgressDisplay",
    "configure_logging",
    "console",
    "create_result_json",
    "format_text_result",
    "print_final_results",
    "print_header",
    "print_network_info",
]
