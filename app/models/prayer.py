# app/models/prayer.py
from sqlalchemy import Column, Integer, ForeignKey, Text, Boolean, DateTime, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship

from app.db.session import Base
from app.models.mixins import TimestampMixin, SoftDeleteMixin
from app.schemas.prayer import PrayerStatusEnum
from app.utils.datetime_utils import utc_now


class PrayerRequest(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "prayer_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    request = Column(Text, nullable=False)
    is_anonymous = Column(Boolean, nullable=False, default=True)
    prayer_count = Column(Integer, nullable=False, default=0)
    status = Column(SQLEnum(PrayerStatusEnum), nullable=False, default=PrayerStatusEnum.pending)
    answered_at = Column(DateTime(timezone=True), nullable=True)
    answer_testimony = Column(Text, nullable=True)

    # Relationships
    logs = relationship("PrayerLog", back_populates="prayer_request")


class PrayerLog(Base):
    __tablename__ = "prayer_logs"
    __table_args__ = (
        UniqueConstraint("prayer_request_id", "user_id", name="uq_prayer_log_request_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    prayer_request_id = Column(Integer, ForeignKey("prayer_requests.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    prayed_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    # Relationships
    prayer_request = relationship("PrayerRequest", back_populates="logs")
