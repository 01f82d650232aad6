# Importing the module registers tables with Base for create_all()
from .core import (  # noqa: F401
    StoreDocument, SessionState, User, AuditLog,
)

__all__ = ["StoreDocument", "SessionState", "User", "AuditLog"]
