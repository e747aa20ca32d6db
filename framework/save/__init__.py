"""
Save module - progression persistence.

Provides:
- Persistence gateway protocol for rewards
- Network vs. generic failure classification
- JSON file store for cards and gem wallets
- Checksum validation
"""

from framework.save.progress import (
    STARTING_GEMS,
    NetworkError,
    PersistenceError,
    PersistenceGateway,
    ProgressStore,
    apply_progression,
    is_network_error,
)

__all__ = [
    "STARTING_GEMS",
    "NetworkError",
    "PersistenceError",
    "PersistenceGateway",
    "ProgressStore",
    "apply_progression",
    "is_network_error",
]
