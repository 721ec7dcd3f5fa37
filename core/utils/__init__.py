"""
Core Utilities Package

Chua cac utility modules:
- rw_lock: Reader/writer lock cho shared caches
"""

from core.utils.rw_lock import ReadWriteLock

__all__ = ["ReadWriteLock"]
