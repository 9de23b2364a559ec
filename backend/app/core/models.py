"""
Declarative base for the document collections.

Every collection row carries a store-assigned UUID ``id`` and
``created_at``/``updated_at`` timestamps. Timestamps are set client-side so
rows created in one transaction still order by creation.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from sqlalchemy import DateTime, String, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Fields a document update never rewrites
IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at"})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    type_annotation_map = {
        str: String(255),
    }


class UUIDMixin:
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )


class BaseModel(Base, UUIDMixin, TimestampMixin):
    """Abstract base for collections stored through ``DocumentStore``."""

    __abstract__ = True

    def update_from_dict(self, data: Mapping[str, Any], exclude: Iterable[str] = IMMUTABLE_FIELDS) -> None:
        """
        Assign mapped attributes from ``data``.

        Keys that are not columns of this model, or that are listed in
        ``exclude``, are ignored.
        """
        columns = self.__table__.columns.keys()
        skipped = set(exclude)
        for key, value in data.items():
            if key in columns and key not in skipped:
                setattr(self, key, value)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id})>"
