from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.logging_middleware import get_client_ip, get_user_agent
from app.db.session import get_db
from app.services.prayer_chain_service import PrayerChainService
from app.services.prayer_service import PrayerService


def get_prayer_service(request: Request, db: Session = Depends(get_db)) -> PrayerService:
    return PrayerService(db, ip_address=get_client_ip(request), user_agent=get_user_agent(request))


def get_prayer_chain_service(request: Request, db: Session = Depends(get_db)) -> PrayerChainService:
    return PrayerChainService(db, ip_address=get_client_ip(request), user_agent=get_user_agent(request))
