"""Tenant model."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ninebox.database import Base
from ninebox.models.types import UUIDStr


class Tenant(Base):
    """Tenant table - one per API key. Scopes every configuration and assessment row."""

    __tablename__ = "tenants"

    tenant_id: Mapped[str] = mapped_column(UUIDStr, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    api_key_hash: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
