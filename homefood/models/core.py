from typing import Any
from sqlalchemy import String, Boolean, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column
from homefood.db import Base
from homefood.models.common import IdMixin, TSMixin

# ── Document store ──────────────────────────────────────────────────────────
class StoreDocument(Base, TSMixin):
    """One JSON tree per top-level key (customers, menus, order_history, ...)."""
    __tablename__ = "store_document"
    root: Mapped[str] = mapped_column(String(120), primary_key=True)
    body: Mapped[Any] = mapped_column(JSON, nullable=True)

# ── Durable session state (cooking / packaging dashboards) ──────────────────
class SessionState(Base, TSMixin):
    __tablename__ = "session_state"
    key: Mapped[str] = mapped_column(String(120), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)

# ── Identity ────────────────────────────────────────────────────────────────
class User(Base, IdMixin, TSMixin):
    __tablename__ = "user"
    name: Mapped[str] = mapped_column(String(160))
    email: Mapped[str] = mapped_column(String(160), unique=True)
    pass_hash: Mapped[str] = mapped_column(String(200))
    active: Mapped[bool] = mapped_column(Boolean, default=True)

# ── Audit ───────────────────────────────────────────────────────────────────
class AuditLog(Base, IdMixin, TSMixin):
    __tablename__ = "audit_log"
    actor_user_id: Mapped[str] = mapped_column(String(36))
    entity: Mapped[str] = mapped_column(String(60))
    entity_id: Mapped[str] = mapped_column(String(200))
    action: Mapped[str] = mapped_column(String(60))
    reason: Mapped[str | None] = mapped_column(Text)  # e.g. why an order was deleted
    before: Mapped[str | None] = mapped_column(Text)
    after: Mapped[str | None] = mapped_column(Text)
