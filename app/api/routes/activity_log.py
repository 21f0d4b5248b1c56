from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.security import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.system_log import SystemLogResponse
from app.services.logging_service import LoggingService

router = APIRouter()


@router.get("", response_model=List[SystemLogResponse])
def read_my_activity(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    action: Optional[str] = Query(None),
    table_name: Optional[str] = Query(None)
):
    """
    Get the caller's own activity log with filtering and pagination.
    """
    return LoggingService.get_user_activity(
        db,
        current_user.id,
        action=action,
        table_name=table_name,
        skip=skip,
        limit=limit
    )
