"""
Utilities package
Logging, terminal text helpers and retry utilities
"""

from .logger import (
    get_logger,
    configure_from_settings,
    setup_logging,
    reconfigure_logging_for_display,
    log_performance,
    get_current_log_file
)
from .helpers import (
    display_width,
    truncate_to_width,
    center_text,
    wrap_text,
    format_timestamp_ms,
    format_duration,
    retry_on_failure
)

__all__ = [
    # Logger exports
    'get_logger',
    'configure_from_settings',
    'setup_logging',
    'reconfigure_logging_for_display',
    'log_performance',
    'get_current_log_file',

    # Helper exports
    'display_width',
    'truncate_to_width',
    'center_text',
    'wrap_text',
    'format_timestamp_ms',
    'format_duration',
    'retry_on_failure'
]
