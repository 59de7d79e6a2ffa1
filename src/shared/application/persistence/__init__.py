"""
Debounced durable persistence.

- DebouncedValue: one key, in-memory value with coalesced durable writes
- PersistenceEngine: one DebouncedValue per key plus shutdown flushing
"""
from src.shared.application.persistence.debounced_value import DebouncedValue, DEFAULT_DEBOUNCE_MS
from src.shared.application.persistence.persistence_engine import PersistenceEngine

__all__ = [
    'DebouncedValue',
    'DEFAULT_DEBOUNCE_MS',
    'PersistenceEngine',
]
