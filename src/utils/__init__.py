"""
Utils module - Logging and path utilities.

Contents:
- message.py: Log class for application logging
- paths.py: Per-user data, log and database locations
"""
from src.utils.message import Log
from src.utils.paths import get_user_data_dir, get_logs_dir, get_database_path

__all__ = [
    'Log',
    'get_user_data_dir',
    'get_logs_dir',
    'get_database_path',
]
