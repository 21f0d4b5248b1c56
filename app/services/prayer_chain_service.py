"""
Prayer chains: membership, commitments between members, and the detailed
chain read model.
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    AlreadyMemberError,
    DuplicateCommitmentError,
    ForbiddenError,
    NotAMemberError,
    NotFoundError,
    NotMemberError,
    SelfCommitmentError,
    TargetNotMemberError,
)
from app.db.session import transaction
from app.models.prayer_chain import PrayerChain, ChainMember, PrayerCommitment
from app.repositories.prayer_chain import PrayerChainRepository
from app.repositories.user import UserRepository
from app.schemas.prayer_chain import (
    ChainMemberResponse,
    PrayerChainCreate,
    PrayerChainDetail,
    PrayerChainUpdate,
    PrayerCommitmentResponse,
)
from app.schemas.user import UserSummary
from app.utils.logging_decorator import (
    extract_argument,
    log_activity,
    log_create,
    log_delete,
    log_update,
)

logger = logging.getLogger(__name__)


class PrayerChainService:
    def __init__(
        self,
        db: Session,
        repository: Optional[PrayerChainRepository] = None,
        user_repository: Optional[UserRepository] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ):
        self.db = db
        self.repo = repository or PrayerChainRepository(db)
        self.user_repo = user_repository or UserRepository(db)
        self.ip_address = ip_address
        self.user_agent = user_agent

    @log_create("prayer_chains", "Created prayer chain")
    def create_prayer_chain(self, user_id: int, data: PrayerChainCreate) -> PrayerChain:
        """Create the chain and enrol its creator as the first member in one transaction."""
        chain = PrayerChain(
            name=data.name,
            description=data.description,
            created_by_user_id=user_id,
        )
        with transaction(self.db):
            self.repo.add(chain)
            self.repo.add_member(chain.id, user_id)

        self.db.refresh(chain)
        logger.info(f"User {user_id} created prayer chain {chain.id}")
        return chain

    def get_prayer_chain(self, chain_id: int) -> PrayerChain:
        chain = self.repo.get_with_members(chain_id)
        if not chain:
            raise NotFoundError("prayer chain not found", {"chain_id": chain_id})
        return chain

    def get_all_prayer_chains(self) -> List[PrayerChain]:
        return self.repo.get_all()

    def get_user_prayer_chains(self, user_id: int) -> List[PrayerChain]:
        return self.repo.get_by_user_id(user_id)

    def _get_created_by(self, chain_id: int, user_id: int, action: str) -> PrayerChain:
        chain = self.get_prayer_chain(chain_id)
        if chain.created_by_user_id != user_id:
            raise ForbiddenError(f"only the creator can {action} the prayer chain", {"chain_id": chain_id})
        return chain

    @log_update("prayer_chains", "Updated prayer chain")
    def update_prayer_chain(self, chain_id: int, user_id: int, data: PrayerChainUpdate) -> PrayerChain:
        chain = self._get_created_by(chain_id, user_id, "update")

        with transaction(self.db):
            chain.name = data.name
            chain.description = data.description

        self.db.refresh(chain)
        return chain

    @log_delete("prayer_chains", "chain_id", "Deleted prayer chain")
    def delete_prayer_chain(self, chain_id: int, user_id: int) -> None:
        chain = self._get_created_by(chain_id, user_id, "delete")

        with transaction(self.db):
            self.repo.soft_delete(chain)

        logger.info(f"User {user_id} deleted prayer chain {chain_id}")

    @log_activity("JOIN", table_name="prayer_chains", get_record_id=extract_argument("chain_id"))
    def join_chain(self, user_id: int, chain_id: int) -> ChainMember:
        chain = self.get_prayer_chain(chain_id)

        already_member = AlreadyMemberError(details={"chain_id": chain_id, "user_id": user_id})
        if self.repo.is_member(chain.id, user_id):
            raise already_member

        with transaction(self.db, conflict_error=already_member):
            member = self.repo.add_member(chain.id, user_id)

        logger.info(f"User {user_id} joined prayer chain {chain_id}")
        return member

    @log_activity("LEAVE", table_name="prayer_chains", get_record_id=extract_argument("chain_id"))
    def leave_chain(self, user_id: int, chain_id: int) -> int:
        """
        Remove the membership together with every commitment in the chain
        made by or targeting the leaving user. Returns the number of
        commitments removed.
        """
        chain = self.get_prayer_chain(chain_id)

        member = self.repo.get_member(chain.id, user_id)
        if not member:
            raise NotMemberError(details={"chain_id": chain_id, "user_id": user_id})

        with transaction(self.db):
            removed = self.repo.delete_commitments_involving(chain.id, member)
            self.repo.remove_member(member)

        logger.info(f"User {user_id} left prayer chain {chain_id}; {removed} commitment(s) removed")
        return removed

    @log_activity(
        "COMMIT",
        table_name="prayer_commitments",
        get_record_id=lambda result, arguments: result.id,
        get_details=lambda result, arguments: {
            "chain_id": arguments["chain_id"],
            "pray_for_user_id": arguments["pray_for_user_id"],
        },
    )
    def commit_to_pray(self, user_id: int, chain_id: int, pray_for_user_id: int) -> PrayerCommitment:
        """
        Checks run in a fixed order and the first failure wins: chain exists,
        caller is a member, target is not the caller, target is a member,
        commitment is new.
        """
        chain = self.get_prayer_chain(chain_id)

        member = self.repo.get_member(chain.id, user_id)
        if not member:
            raise NotAMemberError(
                "must be a member of the prayer chain to commit",
                {"chain_id": chain_id, "user_id": user_id},
            )

        if user_id == pray_for_user_id:
            raise SelfCommitmentError(details={"chain_id": chain_id})

        if not self.repo.is_member(chain.id, pray_for_user_id):
            raise TargetNotMemberError(details={"chain_id": chain_id, "pray_for_user_id": pray_for_user_id})

        duplicate = DuplicateCommitmentError(
            details={"chain_id": chain_id, "member_id": member.id, "pray_for_user_id": pray_for_user_id}
        )
        if self.repo.has_commitment(chain.id, member.id, pray_for_user_id):
            raise duplicate

        with transaction(self.db, conflict_error=duplicate):
            commitment = self.repo.create_commitment(chain.id, member.id, pray_for_user_id)

        logger.info(f"Member {member.id} committed to pray for user {pray_for_user_id} in chain {chain_id}")
        return commitment

    @log_activity(
        "UNCOMMIT",
        table_name="prayer_commitments",
        get_details=lambda result, arguments: {
            "chain_id": arguments["chain_id"],
            "pray_for_user_id": arguments["pray_for_user_id"],
            "removed": result,
        },
    )
    def remove_commitment(self, user_id: int, chain_id: int, pray_for_user_id: int) -> int:
        """Idempotent: removing a commitment that does not exist returns 0."""
        chain = self.get_prayer_chain(chain_id)

        member = self.repo.get_member(chain.id, user_id)
        if not member:
            raise NotAMemberError(details={"chain_id": chain_id, "user_id": user_id})

        with transaction(self.db):
            removed = self.repo.delete_commitment(chain.id, member.id, pray_for_user_id)

        return removed

    def _lookup_users(self, user_ids: Iterable[int]) -> Dict[int, UserSummary]:
        """Identity decoration is best effort; a failed lookup just leaves it out."""
        try:
            return self.user_repo.find_summaries(user_ids)
        except SQLAlchemyError as e:
            logger.warning(f"User lookup failed, omitting identity details: {e}")
            self.db.rollback()
            return {}

    def get_chain_with_details(self, chain_id: int) -> PrayerChainDetail:
        """
        Build the chain read model with three batched queries (members,
        commitments, users) instead of one round trip per member.
        """
        chain = self.get_prayer_chain(chain_id)
        members = self.repo.get_members_by_chain_id(chain.id)
        commitments = self.repo.get_commitments_by_chain_id(chain.id)

        user_ids = {chain.created_by_user_id}
        user_ids.update(member.user_id for member in members)
        user_ids.update(commitment.pray_for_user_id for commitment in commitments)
        users = self._lookup_users(user_ids)

        by_member: Dict[int, List[PrayerCommitmentResponse]] = {}
        for commitment in commitments:
            by_member.setdefault(commitment.member_id, []).append(
                PrayerCommitmentResponse(
                    id=commitment.id,
                    chain_id=commitment.chain_id,
                    member_id=commitment.member_id,
                    pray_for_user_id=commitment.pray_for_user_id,
                    created_at=commitment.created_at,
                    pray_for_user=users.get(commitment.pray_for_user_id),
                )
            )

        member_responses = [
            ChainMemberResponse(
                id=member.id,
                chain_id=member.chain_id,
                user_id=member.user_id,
                created_at=member.created_at,
                user=users.get(member.user_id),
                prayer_commitments=by_member.get(member.id, []),
            )
            for member in members
        ]

        return PrayerChainDetail(
            id=chain.id,
            name=chain.name,
            description=chain.description,
            created_by_user_id=chain.created_by_user_id,
            created_at=chain.created_at,
            updated_at=chain.updated_at,
            members=member_responses,
            created_by=users.get(chain.created_by_user_id),
        )
