"""Column types shared by the models (PostgreSQL native, portable elsewhere)."""

from sqlalchemy import JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB

UUIDStr = Uuid(as_uuid=False)
JSONDoc = JSON().with_variant(JSONB(), "postgresql")
