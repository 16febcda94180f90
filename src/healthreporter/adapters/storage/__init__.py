"""Storage adapters implementing LogStoragePort."""

from healthreporter.adapters.storage.file_log import FileLogStorage
from healthreporter.adapters.storage.in_memory import InMemoryLogStorage

__all__ = ["FileLogStorage", "InMemoryLogStorage"]
