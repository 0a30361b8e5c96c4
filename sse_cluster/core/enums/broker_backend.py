"""Message broker backends.

Selected once at process startup (``SSE_BROKER`` environment variable):
- LOCAL: In-process broker, valid only for a single instance
- REDIS: Redis key/value directory + pub/sub routing for multiple instances
"""

from enum import Enum


class BrokerBackend(str, Enum):
    """Available message broker implementations."""

    LOCAL = "local"
    REDIS = "redis"
