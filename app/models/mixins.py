"""
Column mixins shared by the ORM models.
"""

from sqlalchemy import Column, DateTime

from app.utils.datetime_utils import utc_now


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)


class SoftDeleteMixin:
    """Rows with deleted_at set are hidden from every read path"""
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
