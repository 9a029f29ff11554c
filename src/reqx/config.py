"""
=============================================================================
REQX CONFIGURATION
=============================================================================

Centralized configuration for parsing and running .reqx files.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── reqx api.reqx --strict                                     │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── REQX_STRICT_VARIABLES=1 reqx api.reqx                      │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Parsing settings (error_policy, strict_variables) are read by the
assembler. Transport settings (timeout, verify_tls) are only passed on to
the transport; the parser itself never waits on anything.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


ERROR_POLICIES = ("collect", "abort")
OUTPUT_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class ReqxConfig:
    """
    Configuration for parsing and running a .reqx document.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    PARSING
    - error_policy, strict_variables

    RUNNING
    - dry_run, verbose, output_format

    TRANSPORT
    - timeout, verify_tls

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # PARSING
    # ─────────────────────────────────────────────────────────────────────

    error_policy: str = "collect"
    """
    What to do when a section fails to resolve.
    - "collect" - record the error, keep resolving the other sections
    - "abort"   - raise the first SectionError
    """

    strict_variables: bool = False
    """
    Treat {{name}} without a matching @name as a section error.
    When False the placeholder stays in the text and a warning is logged.
    """

    # ─────────────────────────────────────────────────────────────────────
    # RUNNING
    # ─────────────────────────────────────────────────────────────────────

    dry_run: bool = False
    """Resolve and report requests without sending them."""

    verbose: bool = False
    """Report request/response headers and bodies, not just the summary line."""

    output_format: str = "text"
    """Report format: 'text' for humans, 'json' (one object per line) for tools."""

    # ─────────────────────────────────────────────────────────────────────
    # TRANSPORT
    # ─────────────────────────────────────────────────────────────────────

    timeout: Optional[float] = 30.0
    """Seconds the transport waits for a response. None waits forever."""

    verify_tls: bool = True
    """Verify server certificates for https:// URLs."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "WARNING"
    """Logging level for the reqx loggers."""

    @classmethod
    def from_env(cls) -> "ReqxConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        REQX_ERROR_POLICY      collect | abort        (default: collect)
        REQX_STRICT_VARIABLES  1/true/yes/on          (default: off)
        REQX_OUTPUT_FORMAT     text | json            (default: text)
        REQX_TIMEOUT           seconds, 0 = no limit  (default: 30)
        REQX_VERIFY_TLS        1/true/yes/on          (default: on)
        REQX_LOG_LEVEL         DEBUG ... CRITICAL     (default: WARNING)

        =====================================================================
        """
        timeout: Optional[float] = float(os.getenv("REQX_TIMEOUT", "30"))
        if timeout == 0:
            timeout = None

        return cls(
            error_policy=os.getenv("REQX_ERROR_POLICY", "collect").lower(),
            strict_variables=_env_flag("REQX_STRICT_VARIABLES", False),
            output_format=os.getenv("REQX_OUTPUT_FORMAT", "text").lower(),
            timeout=timeout,
            verify_tls=_env_flag("REQX_VERIFY_TLS", True),
            log_level=os.getenv("REQX_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called before any parsing happens, so a typo in an environment
        variable fails immediately with a clear message.
        """
        if self.error_policy not in ERROR_POLICIES:
            raise ValueError(
                f"Invalid error_policy: {self.error_policy!r}. "
                f"Must be one of {', '.join(ERROR_POLICIES)}."
            )

        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output_format: {self.output_format!r}. "
                f"Must be one of {', '.join(OUTPUT_FORMATS)}."
            )

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0 (or None for no limit)")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level!r}")
