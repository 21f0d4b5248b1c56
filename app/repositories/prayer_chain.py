from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from app.models.prayer_chain import PrayerChain, ChainMember, PrayerCommitment
from app.repositories.base import BaseRepository
from app.utils.datetime_utils import utc_now


class PrayerChainRepository(BaseRepository[PrayerChain]):
    model_class = PrayerChain

    def get_with_members(self, chain_id: int) -> Optional[PrayerChain]:
        return (
            self.query()
            .options(selectinload(PrayerChain.members))
            .filter(PrayerChain.id == chain_id)
            .first()
        )

    def get_all(self) -> List[PrayerChain]:
        return (
            self.query()
            .options(selectinload(PrayerChain.members))
            .order_by(PrayerChain.created_at.desc(), PrayerChain.id.desc())
            .all()
        )

    def get_by_user_id(self, user_id: int) -> List[PrayerChain]:
        return (
            self.query()
            .join(ChainMember, ChainMember.chain_id == PrayerChain.id)
            .filter(ChainMember.user_id == user_id)
            .options(selectinload(PrayerChain.members))
            .order_by(PrayerChain.created_at.desc(), PrayerChain.id.desc())
            .all()
        )

    def soft_delete(self, chain: PrayerChain) -> None:
        chain.deleted_at = utc_now()
        self.db.flush()

    # Chain member methods

    def add_member(self, chain_id: int, user_id: int) -> ChainMember:
        member = ChainMember(chain_id=chain_id, user_id=user_id)
        self.db.add(member)
        self.db.flush()
        return member

    def get_member(self, chain_id: int, user_id: int) -> Optional[ChainMember]:
        return (
            self.db.query(ChainMember)
            .filter(ChainMember.chain_id == chain_id, ChainMember.user_id == user_id)
            .first()
        )

    def is_member(self, chain_id: int, user_id: int) -> bool:
        return self.get_member(chain_id, user_id) is not None

    def get_members_by_chain_id(self, chain_id: int) -> List[ChainMember]:
        return (
            self.db.query(ChainMember)
            .filter(ChainMember.chain_id == chain_id)
            .order_by(ChainMember.created_at.asc(), ChainMember.id.asc())
            .all()
        )

    def remove_member(self, member: ChainMember) -> int:
        return (
            self.db.query(ChainMember)
            .filter(ChainMember.id == member.id)
            .delete(synchronize_session=False)
        )

    # Prayer commitment methods

    def create_commitment(self, chain_id: int, member_id: int, pray_for_user_id: int) -> PrayerCommitment:
        commitment = PrayerCommitment(chain_id=chain_id, member_id=member_id, pray_for_user_id=pray_for_user_id)
        self.db.add(commitment)
        self.db.flush()
        return commitment

    def has_commitment(self, chain_id: int, member_id: int, pray_for_user_id: int) -> bool:
        return (
            self.db.query(PrayerCommitment.id)
            .filter(
                PrayerCommitment.chain_id == chain_id,
                PrayerCommitment.member_id == member_id,
                PrayerCommitment.pray_for_user_id == pray_for_user_id,
            )
            .first()
            is not None
        )

    def get_commitments_by_chain_id(self, chain_id: int) -> List[PrayerCommitment]:
        return (
            self.db.query(PrayerCommitment)
            .filter(PrayerCommitment.chain_id == chain_id)
            .order_by(PrayerCommitment.created_at.asc(), PrayerCommitment.id.asc())
            .all()
        )

    def delete_commitment(self, chain_id: int, member_id: int, pray_for_user_id: int) -> int:
        return (
            self.db.query(PrayerCommitment)
            .filter(
                PrayerCommitment.chain_id == chain_id,
                PrayerCommitment.member_id == member_id,
                PrayerCommitment.pray_for_user_id == pray_for_user_id,
            )
            .delete(synchronize_session=False)
        )

    def delete_commitments_involving(self, chain_id: int, member: ChainMember) -> int:
        """Drop commitments made by the member and commitments targeting the member's user."""
        return (
            self.db.query(PrayerCommitment)
            .filter(
                PrayerCommitment.chain_id == chain_id,
                or_(
                    PrayerCommitment.member_id == member.id,
                    PrayerCommitment.pray_for_user_id == member.user_id,
                ),
            )
            .delete(synchronize_session=False)
        )
