from enum import Enum


class StorageBackend(str, Enum):
    """
    Where the shopping cart snapshot is kept between restarts.

    MEMORY: process memory only (lost on restart)
    REDIS: redis key, shared between processes of the same session
    SQL: cart_snapshots table in the local database
    """
    MEMORY = "memory"
    REDIS = "redis"
    SQL = "sql"
