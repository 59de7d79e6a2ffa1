"""
Per-user storage locations for Require.

The database and log files live outside the source tree, in the
platform's conventional application-data folder:
- macOS: ~/Library/Application Support/Require/
- Windows: %APPDATA%/Require/
- Linux and other Unix: ~/.local/share/require/
"""
import os
import sys
from pathlib import Path


APP_NAME = "Require"


def get_user_data_dir() -> Path:
    """Application data folder for the current platform, created on demand."""
    if sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support" / APP_NAME
    elif sys.platform == "win32":
        base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming")) / APP_NAME
    else:
        base = Path.home() / ".local" / "share" / APP_NAME.lower()

    base.mkdir(parents=True, exist_ok=True)
    return base


def get_logs_dir() -> Path:
    logs_dir = get_user_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def get_database_path(db_name: str = "require") -> Path:
    """SQLite file backing the key-value store."""
    return get_user_data_dir() / f"{db_name}.db"
