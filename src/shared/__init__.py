"""
Shared module containing cross-cutting concerns.

This module contains code that is used across multiple features.
Organized by layer following the vertical module pattern.

Structure:
    shared/
        application/
            persistence/    - Debounced durable values and PersistenceEngine
        domain/
            errors.py       - Domain exceptions
            repositories/   - KeyValueStore contract
            value_objects/  - Point
        utils/              - Logging, ids and timestamps

Usage:
    # Persistence
    from src.shared.application.persistence import PersistenceEngine, DebouncedValue

    # Errors
    from src.shared.domain.errors import InterfaceReferenceError

    # Utils
    from src.shared.utils import Log, generate_id
"""
