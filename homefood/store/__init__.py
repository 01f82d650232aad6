from .base import DocumentStore, Subscription  # noqa: F401
from .memory import MemoryDocumentStore  # noqa: F401
from .sql import SqlDocumentStore  # noqa: F401
from .keyvalue import KeyValueStore, MemoryKeyValueStore, SqlKeyValueStore  # noqa: F401
