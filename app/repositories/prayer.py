from typing import List, Optional

from sqlalchemy.orm import contains_eager

from app.models.prayer import PrayerRequest, PrayerLog
from app.repositories.base import BaseRepository
from app.schemas.prayer import PrayerStatusEnum
from app.utils.datetime_utils import utc_now


class PrayerRepository(BaseRepository[PrayerRequest]):
    model_class = PrayerRequest

    def get_all(self) -> List[PrayerRequest]:
        return self.query().order_by(PrayerRequest.created_at.desc(), PrayerRequest.id.desc()).all()

    def get_by_user_id(self, user_id: int) -> List[PrayerRequest]:
        return (
            self.query()
            .filter(PrayerRequest.user_id == user_id)
            .order_by(PrayerRequest.created_at.desc(), PrayerRequest.id.desc())
            .all()
        )

    def soft_delete(self, prayer_request: PrayerRequest) -> None:
        prayer_request.deleted_at = utc_now()
        self.db.flush()

    def increment_prayer_count(self, prayer_request_id: int) -> int:
        """Single UPDATE ... SET prayer_count = prayer_count + 1; safe under concurrency."""
        return (
            self.db.query(PrayerRequest)
            .filter(PrayerRequest.id == prayer_request_id)
            .update(
                {PrayerRequest.prayer_count: PrayerRequest.prayer_count + 1},
                synchronize_session=False,
            )
        )

    def mark_as_answered(self, prayer_request_id: int, testimony: str) -> int:
        """Only flips a pending row, so a concurrent second answer updates nothing."""
        now = utc_now()
        return (
            self.db.query(PrayerRequest)
            .filter(
                PrayerRequest.id == prayer_request_id,
                PrayerRequest.status == PrayerStatusEnum.pending,
            )
            .update(
                {
                    PrayerRequest.status: PrayerStatusEnum.answered,
                    PrayerRequest.answered_at: now,
                    PrayerRequest.answer_testimony: testimony,
                    PrayerRequest.updated_at: now,
                },
                synchronize_session=False,
            )
        )

    def get_answered(self) -> List[PrayerRequest]:
        return (
            self.query()
            .filter(PrayerRequest.status == PrayerStatusEnum.answered)
            .order_by(PrayerRequest.answered_at.desc(), PrayerRequest.id.desc())
            .all()
        )

    # Prayer log methods

    def create_prayer_log(self, log: PrayerLog) -> PrayerLog:
        self.db.add(log)
        self.db.flush()
        return log

    def has_user_prayed(self, prayer_request_id: int, user_id: int) -> bool:
        return (
            self.db.query(PrayerLog.id)
            .filter(PrayerLog.prayer_request_id == prayer_request_id, PrayerLog.user_id == user_id)
            .first()
            is not None
        )

    def get_prayer_logs_by_user(self, user_id: int) -> List[PrayerLog]:
        """Logs whose request was soft-deleted are left out along with the request."""
        return (
            self.db.query(PrayerLog)
            .join(PrayerLog.prayer_request)
            .options(contains_eager(PrayerLog.prayer_request))
            .filter(PrayerLog.user_id == user_id, PrayerRequest.deleted_at.is_(None))
            .order_by(PrayerLog.prayed_at.desc(), PrayerLog.id.desc())
            .all()
        )

    def get_prayer_logs_by_request(self, prayer_request_id: int) -> List[PrayerLog]:
        return (
            self.db.query(PrayerLog)
            .join(PrayerLog.prayer_request)
            .filter(PrayerLog.prayer_request_id == prayer_request_id, PrayerRequest.deleted_at.is_(None))
            .order_by(PrayerLog.prayed_at.desc(), PrayerLog.id.desc())
            .all()
        )

