from typing import Dict, Iterable, Optional

from sqlalchemy import or_

from app.models.user import User
from app.repositories.base import BaseRepository
from app.schemas.user import UserSummary


class UserRepository(BaseRepository[User]):
    model_class = User

    def find_by_email(self, email: str) -> Optional[User]:
        return self.query().filter(User.email == email).first()

    def exists_with(self, email: str, username: str) -> bool:
        return self.query().filter(or_(User.email == email, User.username == username)).first() is not None

    def find_summaries(self, user_ids: Iterable[int]) -> Dict[int, UserSummary]:
        """Resolve many user ids in one query; unknown ids are simply absent."""
        users = self.get_many(list(user_ids))
        return {user.id: UserSummary.model_validate(user) for user in users}
