"""
Custom logging filters for gql_fetch.

Requests carry credentials in headers and endpoint URLs; these filters keep
them out of log output.
"""

import logging
import re
from typing import List, Pattern, Set


class SensitiveDataFilter(logging.Filter):
    """Filter to mask sensitive data in log messages."""

    def __init__(self) -> None:
        """Initialize sensitive data filter."""
        super().__init__()

        self.patterns: List[Pattern[str]] = [
            # API keys and tokens
            re.compile(
                r'(api[_-]?key|token|secret)["\s]*[:=]["\s]*([a-zA-Z0-9+/=._-]{20,})',
                re.IGNORECASE,
            ),
            re.compile(r"(bearer\s+)([a-zA-Z0-9+/=._-]{20,})", re.IGNORECASE),
            re.compile(
                r'(authorization["\']?\s*[:=]\s*["\']?)(?!bearer\s)([^\s"\',}]{8,})',
                re.IGNORECASE,
            ),
            # Passwords
            re.compile(
                r'(password|passwd|pwd)["\s]*[:=]["\s]*([^\s"\']+)', re.IGNORECASE
            ),
            # URLs with credentials
            re.compile(r"(https?://[^:/\s]+):([^@/\s]+)@", re.IGNORECASE),
        ]

        self.replacements = [
            r"\1: ***MASKED***",  # API keys and tokens
            r"\1***MASKED***",  # Bearer tokens
            r"\1***MASKED***",  # Authorization headers
            r"\1: ***MASKED***",  # Passwords
            r"\1:***MASKED***@",  # URL credentials
        ]

    def mask(self, message: str) -> str:
        """Apply every masking pattern to a message."""
        for pattern, replacement in zip(self.patterns, self.replacements):
            message = pattern.sub(replacement, message)
        return message

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record to mask sensitive data."""
        record.msg = self.mask(record.getMessage())
        record.args = ()
        return True


class ComponentFilter(logging.Filter):
    """Filter for component-specific logging."""

    def __init__(self, component: str, allowed_levels: Set[str] | None = None) -> None:
        """
        Initialize component filter.

        Args:
            component: Logger name prefix to accept
            allowed_levels: Level names to accept (all if None)
        """
        super().__init__()
        self.component = component
        self.allowed_levels = allowed_levels

    def filter(self, record: logging.LogRecord) -> bool:
        """Accept records from the component, optionally by level."""
        if not (record.name == self.component or record.name.startswith(self.component + ".")):
            return False
        if self.allowed_levels is not None:
            return record.levelname in self.allowed_levels
        return True
