"""Runtime policy configuration.

Thresholds that callers are allowed to tune live here. The severity to
due-date table is deliberately not configurable and lives with the bundle
generator.
"""

import os
from dataclasses import dataclass, fields
from typing import Optional

from compliance_loop.core.errors import ConfigurationError
from compliance_loop.core.logging import configure_logging

ENV_PREFIX = "COMPLIANCE_LOOP_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class PolicyConfig:
    """Thresholds used by the due-status, reminder and escalation passes."""

    due_soon_days: int = 7
    reminder_due_soon_days: int = 3
    inactivity_threshold_days: int = 5
    duplicate_window_days: int = 7
    log_level: str = "INFO"
    json_logs: bool = False

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "PolicyConfig":
        """Build a config from ``COMPLIANCE_LOOP_*`` environment variables.

        Unset variables keep their defaults. Raises ConfigurationError for
        values that cannot be parsed.
        """
        env = os.environ if environ is None else environ
        values = {}

        for f in fields(cls):
            name = f"{ENV_PREFIX}{f.name.upper()}"
            raw = env.get(name)
            if raw is None:
                continue

            if f.type in (int, "int"):
                try:
                    parsed = int(raw)
                except ValueError:
                    raise ConfigurationError(
                        f"{name} must be an integer", setting=name, value=raw
                    )
                if parsed < 0:
                    raise ConfigurationError(
                        f"{name} must not be negative", setting=name, value=raw
                    )
                values[f.name] = parsed
            elif f.type in (bool, "bool"):
                lowered = raw.strip().lower()
                if lowered in _TRUE_VALUES:
                    values[f.name] = True
                elif lowered in _FALSE_VALUES:
                    values[f.name] = False
                else:
                    raise ConfigurationError(
                        f"{name} must be a boolean", setting=name, value=raw
                    )
            else:
                values[f.name] = raw.strip()

        return cls(**values)

    def configure_logging(self, log_file: Optional[str] = None) -> None:
        """Apply ``log_level`` and ``json_logs`` to the structlog setup."""
        configure_logging(
            level=self.log_level,
            json_format=self.json_logs,
            log_file=log_file,
        )
