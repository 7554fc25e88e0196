"""
disktrend.config
AUTHOR: carter-vin

Monitor configuration (plain values, passed explicitly)

Config file (optional, JSON object, camelCase keys):
  {
    "pollIntervalSeconds": 30,
    "windowHours": 24,
    "retentionHours": 24,
    "maxSamples": 2880,
    "cautionPercent": 20,
    "warningPercent": 10,
    "criticalPercent": 5
  }

Missing file -> defaults. Unreadable / inconsistent file -> ConfigError.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from datetime import timedelta
from pathlib import Path
from typing import Any

from disktrend.errors import ConfigError
from disktrend.history import DEFAULT_MAX_SAMPLES
from disktrend.trend import StatusThresholds

DEFAULT_CONFIG_PATH = Path("disktrend.json")


@dataclass(frozen=True)
class MonitorConfig:
    poll_interval_s: int = 30
    window_hours: float = 24.0
    retention_hours: float = 24.0
    max_samples: int = DEFAULT_MAX_SAMPLES
    thresholds: StatusThresholds = field(default_factory=StatusThresholds)

    @property
    def retention(self) -> timedelta:
        return timedelta(hours=self.retention_hours)

    def validate(self) -> None:
        """
        Raises ConfigError on invalid values
        """
        if self.poll_interval_s < 1:
            raise ConfigError("poll_interval_s must be >= 1")
        if self.window_hours <= 0:
            raise ConfigError("window_hours must be > 0")
        if self.retention_hours < self.window_hours:
            raise ConfigError("retention_hours must be >= window_hours")
        if self.max_samples < 2:
            raise ConfigError("max_samples must be >= 2")
        try:
            self.thresholds.validate()
        except ValueError as e:
            raise ConfigError(str(e)) from e

    def with_overrides(self, **overrides: Any) -> "MonitorConfig":
        """
        Copy with non-None overrides applied (CLI options win over file values)
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        updated = replace(self, **values)
        updated.validate()
        return updated

    def to_dict(self) -> dict[str, Any]:
        return {
            "pollIntervalSeconds": self.poll_interval_s,
            "windowHours": self.window_hours,
            "retentionHours": self.retention_hours,
            "maxSamples": self.max_samples,
            "cautionPercent": self.thresholds.caution_pct,
            "warningPercent": self.thresholds.warning_pct,
            "criticalPercent": self.thresholds.critical_pct,
        }

    @staticmethod
    def from_dict(payload: dict[str, Any]) -> "MonitorConfig":
        defaults = MonitorConfig()
        try:
            window_hours = float(payload.get("windowHours", defaults.window_hours))
            config = MonitorConfig(
                poll_interval_s=int(payload.get("pollIntervalSeconds", defaults.poll_interval_s)),
                window_hours=window_hours,
                # retention follows the window unless set explicitly
                retention_hours=float(payload.get("retentionHours", max(window_hours, defaults.retention_hours))),
                max_samples=int(payload.get("maxSamples", defaults.max_samples)),
                thresholds=StatusThresholds(
                    caution_pct=float(payload.get("cautionPercent", defaults.thresholds.caution_pct)),
                    warning_pct=float(payload.get("warningPercent", defaults.thresholds.warning_pct)),
                    critical_pct=float(payload.get("criticalPercent", defaults.thresholds.critical_pct)),
                ),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid config value: {e}") from e

        config.validate()
        return config


def load_config(path: Path | None = None) -> MonitorConfig:
    """
    Load config from disk

    Returns:
    - defaults if the file does not exist
    - parsed + validated MonitorConfig otherwise
    """
    path = path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return MonitorConfig()

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"failed reading config at {path}: {e}") from e

    if not isinstance(payload, dict):
        raise ConfigError(f"config at {path} must be a JSON object")

    return MonitorConfig.from_dict(payload)
