import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core import security
from app.core.exceptions import ConflictError
from app.db.session import transaction
from app.models.user import User
from app.repositories.user import UserRepository
from app.schemas.user import UserCreate
from app.services.logging_service import LoggingService

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return UserRepository(db).find_by_email(email)


def _record_account_activity(
    db: Session,
    user: User,
    action: str,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> None:
    try:
        LoggingService.log_activity(
            db=db,
            user_id=user.id,
            action=action,
            description=LoggingService.get_action_description(action, "users"),
            table_name="users",
            record_id=user.id,
            ip_address=ip_address,
            user_agent=user_agent,
        )
    except Exception as e:
        logger.error(f"Failed to log {action} for user {user.id}: {e}")
        db.rollback()


def create_user(
    db: Session,
    data: UserCreate,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> User:
    """Register a new account; email and username must both be unused."""
    repo = UserRepository(db)
    duplicate = ConflictError("user with this email or username already exists")
    if repo.exists_with(data.email, data.username):
        raise duplicate

    user = User(
        username=data.username,
        email=data.email,
        hashed_password=security.get_password_hash(data.password),
    )
    with transaction(db, conflict_error=duplicate):
        repo.add(user)

    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    _record_account_activity(db, user, "REGISTER", ip_address, user_agent)
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if not user or not security.verify_password(password, user.hashed_password):
        return None
    return user


def login_user(
    db: Session,
    email: str,
    password: str,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> Optional[User]:
    """Authenticate and record the login; failed attempts are not recorded."""
    user = authenticate_user(db, email, password)
    if user:
        _record_account_activity(db, user, "LOGIN", ip_address, user_agent)
    return user
