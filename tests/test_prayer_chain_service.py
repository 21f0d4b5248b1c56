"""
Tests for prayer chains: membership, commitments and the detail read model.
"""

import pytest
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import (
    AlreadyMemberError,
    DuplicateCommitmentError,
    ForbiddenError,
    NotAMemberError,
    NotFoundError,
    NotMemberError,
    SelfCommitmentError,
    StorageError,
    TargetNotMemberError,
)
from app.models.prayer_chain import ChainMember, PrayerChain, PrayerCommitment
from app.models.system_log import SystemLog
from app.schemas.prayer_chain import PrayerChainCreate, PrayerChainUpdate
from app.services.prayer_chain_service import PrayerChainService


@pytest.fixture
def service(db):
    return PrayerChainService(db)


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def chain(service, alice):
    return service.create_prayer_chain(alice.id, PrayerChainCreate(name="Morning Warriors", description="6am"))


def member_count(db, chain_id):
    return db.query(ChainMember).filter(ChainMember.chain_id == chain_id).count()


class TestCreateChain:
    def test_creator_is_first_member(self, db, chain, alice):
        assert chain.created_by_user_id == alice.id
        assert [m.user_id for m in chain.members] == [alice.id]
        assert member_count(db, chain.id) == 1

    def test_member_insert_failure_leaves_no_chain(self, db, service, alice):
        with patch.object(service.repo, "add_member", side_effect=SQLAlchemyError("insert failed")):
            with pytest.raises(StorageError):
                service.create_prayer_chain(alice.id, PrayerChainCreate(name="Half made"))

        assert db.query(PrayerChain).count() == 0

    def test_records_create_activity(self, db, chain, alice):
        entry = db.query(SystemLog).filter(SystemLog.action == "CREATE").one()
        assert entry.table_name == "prayer_chains"
        assert entry.record_id == chain.id
        assert entry.user_id == alice.id


class TestJoinAndLeave:
    def test_join_twice_conflicts(self, db, service, chain, bob):
        service.join_chain(bob.id, chain.id)
        assert member_count(db, chain.id) == 2

        with pytest.raises(AlreadyMemberError):
            service.join_chain(bob.id, chain.id)
        assert member_count(db, chain.id) == 2

    def test_unique_constraint_catches_join_race(self, db, service, chain, bob):
        service.join_chain(bob.id, chain.id)

        with patch.object(service.repo, "is_member", return_value=False):
            with pytest.raises(AlreadyMemberError):
                service.join_chain(bob.id, chain.id)

        assert member_count(db, chain.id) == 2

    def test_join_missing_chain(self, service, bob):
        with pytest.raises(NotFoundError):
            service.join_chain(bob.id, 9999)

    def test_leave_without_membership(self, service, chain, bob):
        with pytest.raises(NotMemberError) as exc_info:
            service.leave_chain(bob.id, chain.id)
        assert exc_info.value.kind == "invalid_operation"
        assert exc_info.value.status_code == 400

    def test_leave_and_commit_share_membership_error(self):
        assert NotMemberError is NotAMemberError

    def test_leave_missing_chain(self, service, bob):
        with pytest.raises(NotFoundError):
            service.leave_chain(bob.id, 9999)

    def test_leave_removes_commitments_both_ways(self, db, service, chain, alice, bob, make_user):
        carol = make_user("carol")
        service.join_chain(bob.id, chain.id)
        service.join_chain(carol.id, chain.id)

        service.commit_to_pray(bob.id, chain.id, alice.id)
        service.commit_to_pray(alice.id, chain.id, bob.id)
        service.commit_to_pray(alice.id, chain.id, carol.id)

        removed = service.leave_chain(bob.id, chain.id)

        assert removed == 2
        assert member_count(db, chain.id) == 2
        remaining = db.query(PrayerCommitment).all()
        assert [c.pray_for_user_id for c in remaining] == [carol.id]

    def test_my_chains(self, service, chain, alice, bob):
        other = service.create_prayer_chain(bob.id, PrayerChainCreate(name="Evening Vespers"))

        assert [c.id for c in service.get_user_prayer_chains(alice.id)] == [chain.id]

        service.join_chain(alice.id, other.id)
        assert [c.id for c in service.get_user_prayer_chains(alice.id)] == [other.id, chain.id]
        assert [c.id for c in service.get_all_prayer_chains()] == [other.id, chain.id]


class TestCommitToPray:
    def test_commitment_is_keyed_by_member(self, db, service, chain, alice, bob):
        member = service.join_chain(bob.id, chain.id)

        commitment = service.commit_to_pray(bob.id, chain.id, alice.id)

        assert commitment.member_id == member.id
        assert commitment.pray_for_user_id == alice.id
        assert commitment.chain_id == chain.id

    def test_self_commitment(self, service, chain, alice, bob):
        service.join_chain(bob.id, chain.id)

        with pytest.raises(SelfCommitmentError):
            service.commit_to_pray(bob.id, chain.id, bob.id)

    def test_duplicate_commitment(self, service, chain, alice, bob):
        service.join_chain(bob.id, chain.id)
        service.commit_to_pray(bob.id, chain.id, alice.id)

        with pytest.raises(DuplicateCommitmentError):
            service.commit_to_pray(bob.id, chain.id, alice.id)

    def test_unique_constraint_catches_commit_race(self, db, service, chain, alice, bob):
        service.join_chain(bob.id, chain.id)
        service.commit_to_pray(bob.id, chain.id, alice.id)

        with patch.object(service.repo, "has_commitment", return_value=False):
            with pytest.raises(DuplicateCommitmentError):
                service.commit_to_pray(bob.id, chain.id, alice.id)

        assert db.query(PrayerCommitment).count() == 1

    def test_target_from_another_chain(self, service, chain, alice, bob):
        service.create_prayer_chain(bob.id, PrayerChainCreate(name="Elsewhere"))

        with pytest.raises(TargetNotMemberError):
            service.commit_to_pray(alice.id, chain.id, bob.id)

    def test_caller_must_be_member(self, service, chain, alice, bob):
        with pytest.raises(NotAMemberError) as exc_info:
            service.commit_to_pray(bob.id, chain.id, alice.id)
        assert exc_info.value.message == "must be a member of the prayer chain to commit"

    def test_missing_chain(self, service, alice, bob):
        with pytest.raises(NotFoundError):
            service.commit_to_pray(alice.id, 9999, bob.id)

    def test_lone_creator_hits_self_check_first(self, service, chain, alice):
        with pytest.raises(SelfCommitmentError):
            service.commit_to_pray(alice.id, chain.id, alice.id)

    def test_records_commit_activity(self, db, service, chain, alice, bob):
        service.join_chain(bob.id, chain.id)
        commitment = service.commit_to_pray(bob.id, chain.id, alice.id)

        entry = db.query(SystemLog).filter(SystemLog.action == "COMMIT").one()
        assert entry.user_id == bob.id
        assert entry.record_id == commitment.id
        assert entry.details == {"chain_id": chain.id, "pray_for_user_id": alice.id}


class TestRemoveCommitment:
    def test_remove_is_idempotent(self, db, service, chain, alice, bob):
        service.join_chain(bob.id, chain.id)
        service.commit_to_pray(bob.id, chain.id, alice.id)

        assert service.remove_commitment(bob.id, chain.id, alice.id) == 1
        assert service.remove_commitment(bob.id, chain.id, alice.id) == 0
        assert db.query(PrayerCommitment).count() == 0

    def test_only_removes_own_commitment(self, db, service, chain, alice, bob, make_user):
        carol = make_user("carol")
        service.join_chain(bob.id, chain.id)
        service.join_chain(carol.id, chain.id)
        service.commit_to_pray(bob.id, chain.id, alice.id)
        service.commit_to_pray(carol.id, chain.id, alice.id)

        assert service.remove_commitment(bob.id, chain.id, alice.id) == 1
        assert db.query(PrayerCommitment).count() == 1

    def test_non_member(self, service, chain, alice, bob):
        with pytest.raises(NotAMemberError):
            service.remove_commitment(bob.id, chain.id, alice.id)

    def test_missing_chain(self, service, alice, bob):
        with pytest.raises(NotFoundError):
            service.remove_commitment(bob.id, 9999, alice.id)


class TestCreatorOnly:
    def test_creator_updates(self, service, chain, alice):
        updated = service.update_prayer_chain(
            chain.id, alice.id, PrayerChainUpdate(name="Dawn Warriors", description=None)
        )
        assert updated.name == "Dawn Warriors"
        assert updated.description is None

    def test_member_cannot_update(self, service, chain, bob):
        service.join_chain(bob.id, chain.id)

        with pytest.raises(ForbiddenError):
            service.update_prayer_chain(chain.id, bob.id, PrayerChainUpdate(name="Hijacked"))

    def test_member_cannot_delete(self, service, chain, bob):
        service.join_chain(bob.id, chain.id)

        with pytest.raises(ForbiddenError):
            service.delete_prayer_chain(chain.id, bob.id)

    def test_deleted_chain_is_not_found(self, service, chain, alice, bob):
        service.delete_prayer_chain(chain.id, alice.id)

        with pytest.raises(NotFoundError):
            service.get_prayer_chain(chain.id)
        with pytest.raises(NotFoundError):
            service.join_chain(bob.id, chain.id)
        assert service.get_all_prayer_chains() == []
        assert service.get_user_prayer_chains(alice.id) == []


class TestChainDetails:
    def test_details_resolve_identities(self, service, chain, alice, bob):
        service.join_chain(bob.id, chain.id)
        service.commit_to_pray(bob.id, chain.id, alice.id)

        detail = service.get_chain_with_details(chain.id)

        assert detail.created_by.username == "alice"
        assert [m.user.username for m in detail.members] == ["alice", "bob"]
        assert detail.members[0].prayer_commitments == []

        bob_commitments = detail.members[1].prayer_commitments
        assert len(bob_commitments) == 1
        assert bob_commitments[0].pray_for_user_id == alice.id
        assert bob_commitments[0].pray_for_user.email == "alice@example.com"

    def test_failed_lookup_omits_identities(self, service, chain, alice, bob):
        service.join_chain(bob.id, chain.id)
        service.commit_to_pray(bob.id, chain.id, alice.id)

        with patch.object(service.user_repo, "find_summaries", side_effect=SQLAlchemyError("lookup down")):
            detail = service.get_chain_with_details(chain.id)

        assert detail.created_by is None
        assert [m.user for m in detail.members] == [None, None]
        assert detail.members[1].prayer_commitments[0].pray_for_user is None
        assert detail.members[1].prayer_commitments[0].pray_for_user_id == alice.id

    def test_missing_chain(self, service):
        with pytest.raises(NotFoundError):
            service.get_chain_with_details(9999)


def test_morning_warriors_scenario(db, service, make_user):
    """Create, join, commit, then leave with commitments cascading"""
    a = make_user("a_user")
    b = make_user("b_user")

    chain = service.create_prayer_chain(a.id, PrayerChainCreate(name="Morning Warriors"))
    assert member_count(db, chain.id) == 1

    service.join_chain(b.id, chain.id)
    assert member_count(db, chain.id) == 2

    commitment = service.commit_to_pray(b.id, chain.id, a.id)
    assert commitment.pray_for_user_id == a.id

    service.leave_chain(b.id, chain.id)
    assert member_count(db, chain.id) == 1
    assert db.query(PrayerCommitment).count() == 0
