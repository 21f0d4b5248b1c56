from sqlalchemy.orm import Session
from typing import Optional, Dict, Any
from app.models.system_log import SystemLog
from app.models.user import User


class LoggingService:
    """Service for recording user activities in the system_logs table"""

    @staticmethod
    def log_activity(
        db: Session,
        user_id: int,
        action: str,
        description: str,
        table_name: Optional[str] = None,
        record_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> SystemLog:
        """
        Log a system activity

        Args:
            db: Database session
            user_id: ID of the user who performed the action
            action: Action type (CREATE, UPDATE, DELETE, JOIN, PRAY, etc.)
            description: Human-readable description of the action
            table_name: Name of the table affected
            record_id: ID of the record affected
            details: Additional context as dictionary
            ip_address: IP address of the user
            user_agent: User agent string
        """
        user = db.query(User).filter(User.id == user_id).first()

        log_entry = SystemLog(
            user_id=user_id,
            user_name=user.username if user else None,
            action=action.upper(),
            description=description,
            table_name=table_name,
            record_id=record_id,
            details=details,
            ip_address=ip_address,
            user_agent=user_agent
        )

        db.add(log_entry)
        db.commit()
        db.refresh(log_entry)

        return log_entry

    @staticmethod
    def get_action_description(action: str, table_name: str) -> str:
        """Generate human-readable descriptions for common actions"""
        descriptions = {
            "CREATE": f"Created new {table_name}",
            "UPDATE": f"Updated {table_name}",
            "DELETE": f"Deleted {table_name}",
            "REGISTER": "Registered new account",
            "LOGIN": "Logged into the system",
            "JOIN": f"Joined {table_name}",
            "LEAVE": f"Left {table_name}",
            "PRAY": "Prayed for a prayer request",
            "ANSWER": "Marked a prayer request as answered",
            "COMMIT": "Committed to pray for a chain member",
            "UNCOMMIT": "Removed a prayer commitment",
        }

        return descriptions.get(action.upper(), f"Performed {action.lower()} on {table_name}")

    @staticmethod
    def get_user_activity(
        db: Session,
        user_id: int,
        action: Optional[str] = None,
        table_name: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ):
        """Get a user's own activity rows, newest first"""
        query = db.query(SystemLog).filter(SystemLog.user_id == user_id)

        if action:
            query = query.filter(SystemLog.action == action.upper())

        if table_name:
            query = query.filter(SystemLog.table_name == table_name)

        return query.order_by(SystemLog.created_at.desc(), SystemLog.id.desc()).offset(skip).limit(limit).all()
