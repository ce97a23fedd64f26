"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts with no configuration at all: lab data is kept in
``lab-data.json`` in the working directory and a small illustrative
dataset is loaded the first time the service runs.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Lab Manager API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path to a log file in addition to the console handler.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path of the JSON snapshot holding all lab data.  Relative paths are
    # resolved against the current working directory by the store.
    data_file: str = os.getenv("LAB_DATA_FILE", "lab-data.json")

    # Populate the store with the illustrative dataset when no snapshot
    # file exists yet.
    seed_on_empty: bool = _env_flag("SEED_ON_EMPTY", "true")

    # Meeting dates and times are local to the lab.  "Today" for the
    # upcoming meetings view and intern expiry warnings is computed in
    # this zone.
    timezone: str = os.getenv("LAB_TIMEZONE", "Asia/Kolkata")
    upcoming_meetings_weeks: int = int(os.getenv("UPCOMING_MEETINGS_WEEKS", "2"))
    intern_expiry_warning_days: int = int(os.getenv("INTERN_EXPIRY_WARNING_DAYS", "30"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
