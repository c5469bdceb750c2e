"""Memory module."""

from .health_memory import SLOW_SERVICE_THRESHOLD_MS, HealthMemory, IHealthMemory
from .rwlock import ReadWriteLock

__all__ = ["HealthMemory", "IHealthMemory", "ReadWriteLock", "SLOW_SERVICE_THRESHOLD_MS"]
