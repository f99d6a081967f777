"""Settings loaded from the environment (and an optional .env file)."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime

import pytz
from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "weights.json")
DEFAULT_TIMEZONE = "America/Chicago"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Config:
    data_path: str = DEFAULT_DATA_PATH
    notification_seconds: float = 3.0
    timezone: str = DEFAULT_TIMEZONE
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            data_path=os.getenv("WEIGHT_TRACKER_DATA_PATH") or DEFAULT_DATA_PATH,
            notification_seconds=float(os.getenv("WEIGHT_TRACKER_NOTIFICATION_SECONDS") or 3.0),
            timezone=os.getenv("WEIGHT_TRACKER_TIMEZONE") or DEFAULT_TIMEZONE,
            log_level=(os.getenv("WEIGHT_TRACKER_LOG_LEVEL") or "INFO").upper(),
        )

    def validate(self) -> None:
        if self.notification_seconds <= 0:
            raise ValueError("WEIGHT_TRACKER_NOTIFICATION_SECONDS must be positive")
        if self.timezone not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {self.timezone}")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level)

    def today(self) -> date:
        return datetime.now(pytz.timezone(self.timezone)).date()
