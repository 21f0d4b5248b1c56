from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON

from app.db.session import Base
from app.utils.datetime_utils import utc_now


class SystemLog(Base):
    __tablename__ = "system_logs"

    id = Column(Integer, primary_key=True, index=True)

    # User who performed the action
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user_name = Column(String, nullable=True)

    # Action details
    action = Column(String, nullable=False)  # e.g. "CREATE", "JOIN", "PRAY"
    description = Column(Text, nullable=False)
    table_name = Column(String, nullable=True)
    record_id = Column(Integer, nullable=True)

    # Additional context
    details = Column(JSON, nullable=True)
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
