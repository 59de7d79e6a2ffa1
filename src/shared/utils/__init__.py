"""
Shared utilities module.

Usage:
    from src.shared.utils import Log, generate_id
    Log.info("Message")
"""
from src.utils.message import Log
from src.shared.utils.identity import generate_id, utc_now, parse_timestamp

__all__ = [
    'Log',
    'generate_id',
    'utc_now',
    'parse_timestamp',
]
