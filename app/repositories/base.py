"""
Generic repository over a SQLAlchemy session.

Repositories only read and write rows. They never commit; the calling
service owns the transaction boundary.
"""

import logging
from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

T = TypeVar("T")


class BaseRepository(Generic[T]):
    model_class: Type[T]

    def __init__(self, db: Session):
        self.db = db
        self.log = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def query(self):
        query = self.db.query(self.model_class)
        if hasattr(self.model_class, "deleted_at"):
            query = query.filter(self.model_class.deleted_at.is_(None))
        return query

    def get(self, id_value: int) -> Optional[T]:
        instance = self.query().filter(self.model_class.id == id_value).first()
        self.log.debug(f"get {self.model_class.__name__} id={id_value} found={instance is not None}")
        return instance

    def get_many(self, id_values: List[int]) -> List[T]:
        if not id_values:
            return []
        return self.query().filter(self.model_class.id.in_(set(id_values))).all()

    def add(self, instance: T) -> T:
        """Stage a new row and flush so its primary key is populated."""
        self.db.add(instance)
        self.db.flush()
        return instance
