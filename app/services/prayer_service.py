"""
Prayer tracking: prayer requests, once-only prayer logging and the
pending -> answered transition.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import (
    AlreadyAnsweredError,
    AlreadyPrayedError,
    ForbiddenError,
    InvalidOperationError,
    NotFoundError,
)
from app.db.session import transaction
from app.models.prayer import PrayerRequest, PrayerLog
from app.repositories.prayer import PrayerRepository
from app.schemas.prayer import PrayerRequestCreate, PrayerRequestUpdate, PrayerStatusEnum
from app.utils.datetime_utils import utc_now
from app.utils.logging_decorator import (
    extract_argument,
    log_activity,
    log_create,
    log_delete,
    log_update,
)

logger = logging.getLogger(__name__)


class PrayerService:
    def __init__(
        self,
        db: Session,
        repository: Optional[PrayerRepository] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ):
        self.db = db
        self.repo = repository or PrayerRepository(db)
        self.ip_address = ip_address
        self.user_agent = user_agent

    @log_create("prayer_requests", "Created prayer request")
    def create_prayer_request(self, user_id: int, data: PrayerRequestCreate) -> PrayerRequest:
        prayer_request = PrayerRequest(
            user_id=user_id,
            request=data.request,
            is_anonymous=data.is_anonymous,
            prayer_count=0,
            status=PrayerStatusEnum.pending,
        )
        with transaction(self.db):
            self.repo.add(prayer_request)

        self.db.refresh(prayer_request)
        logger.info(f"User {user_id} created prayer request {prayer_request.id}")
        return prayer_request

    def get_prayer_request(self, prayer_request_id: int) -> PrayerRequest:
        prayer_request = self.repo.get(prayer_request_id)
        if not prayer_request:
            raise NotFoundError("prayer request not found", {"prayer_request_id": prayer_request_id})
        return prayer_request

    def get_all_prayer_requests(self) -> List[PrayerRequest]:
        return self.repo.get_all()

    def get_user_prayer_requests(self, user_id: int) -> List[PrayerRequest]:
        return self.repo.get_by_user_id(user_id)

    def _get_owned(self, prayer_request_id: int, user_id: int, action: str) -> PrayerRequest:
        prayer_request = self.get_prayer_request(prayer_request_id)
        if prayer_request.user_id != user_id:
            raise ForbiddenError(
                f"you can only {action} your own prayer requests",
                {"prayer_request_id": prayer_request_id},
            )
        return prayer_request

    @log_update("prayer_requests", "Updated prayer request")
    def update_prayer_request(self, prayer_request_id: int, user_id: int, data: PrayerRequestUpdate) -> PrayerRequest:
        prayer_request = self._get_owned(prayer_request_id, user_id, "update")

        with transaction(self.db):
            prayer_request.request = data.request
            prayer_request.is_anonymous = data.is_anonymous

        self.db.refresh(prayer_request)
        return prayer_request

    @log_delete("prayer_requests", "prayer_request_id", "Deleted prayer request")
    def delete_prayer_request(self, prayer_request_id: int, user_id: int) -> None:
        prayer_request = self._get_owned(prayer_request_id, user_id, "delete")

        with transaction(self.db):
            self.repo.soft_delete(prayer_request)

        logger.info(f"User {user_id} deleted prayer request {prayer_request_id}")

    @log_activity("PRAY", table_name="prayer_requests", get_record_id=extract_argument("prayer_request_id"))
    def pray_for_request(self, prayer_request_id: int, user_id: int) -> PrayerRequest:
        """
        Record that the user prayed for the request, at most once per user.

        The existence check is only a fast path; the unique constraint on
        (prayer_request_id, user_id) decides races. The log row and the
        counter increment commit together.
        """
        self.get_prayer_request(prayer_request_id)

        already_prayed = AlreadyPrayedError(
            details={"prayer_request_id": prayer_request_id, "user_id": user_id}
        )
        if self.repo.has_user_prayed(prayer_request_id, user_id):
            raise already_prayed

        with transaction(self.db, conflict_error=already_prayed):
            self.repo.create_prayer_log(
                PrayerLog(prayer_request_id=prayer_request_id, user_id=user_id, prayed_at=utc_now())
            )
            self.repo.increment_prayer_count(prayer_request_id)

        logger.info(f"User {user_id} prayed for request {prayer_request_id}")
        return self.get_prayer_request(prayer_request_id)

    def get_my_prayers(self, user_id: int) -> List[PrayerLog]:
        return self.repo.get_prayer_logs_by_user(user_id)

    def get_prayers_for_request(self, prayer_request_id: int) -> List[PrayerLog]:
        self.get_prayer_request(prayer_request_id)
        return self.repo.get_prayer_logs_by_request(prayer_request_id)

    @log_activity("ANSWER", table_name="prayer_requests", get_record_id=extract_argument("prayer_request_id"))
    def mark_as_answered(self, prayer_request_id: int, user_id: int, testimony: str) -> PrayerRequest:
        prayer_request = self._get_owned(prayer_request_id, user_id, "mark as answered")

        if prayer_request.status == PrayerStatusEnum.answered:
            raise AlreadyAnsweredError(details={"prayer_request_id": prayer_request_id})
        if prayer_request.status != PrayerStatusEnum.pending:
            raise InvalidOperationError(
                "only pending prayer requests can be marked as answered",
                {"status": prayer_request.status.value},
            )

        with transaction(self.db):
            updated = self.repo.mark_as_answered(prayer_request_id, testimony)
            if updated == 0:
                # Another request answered it between our read and this write
                raise AlreadyAnsweredError(details={"prayer_request_id": prayer_request_id})

        self.db.refresh(prayer_request)
        logger.info(f"Prayer request {prayer_request_id} marked as answered")
        return prayer_request

    def get_answered_prayers(self) -> List[PrayerRequest]:
        return self.repo.get_answered()
