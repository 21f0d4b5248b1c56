# app/models/prayer_chain.py
from sqlalchemy import Column, Integer, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.session import Base
from app.models.mixins import TimestampMixin, SoftDeleteMixin


class PrayerChain(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "prayer_chains"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    members = relationship(
        "ChainMember",
        back_populates="chain",
        cascade="all, delete-orphan",
        order_by="ChainMember.id",
    )


class ChainMember(Base, TimestampMixin):
    __tablename__ = "chain_members"
    __table_args__ = (
        UniqueConstraint("chain_id", "user_id", name="uq_chain_member_chain_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    chain_id = Column(Integer, ForeignKey("prayer_chains.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    chain = relationship("PrayerChain", back_populates="members")
    commitments = relationship(
        "PrayerCommitment",
        back_populates="member",
        cascade="all, delete-orphan",
        order_by="PrayerCommitment.id",
    )


class PrayerCommitment(Base, TimestampMixin):
    __tablename__ = "prayer_commitments"
    __table_args__ = (
        UniqueConstraint("chain_id", "member_id", "pray_for_user_id", name="uq_commitment_chain_member_target"),
    )

    id = Column(Integer, primary_key=True, index=True)
    chain_id = Column(Integer, ForeignKey("prayer_chains.id"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("chain_members.id"), nullable=False, index=True)
    pray_for_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    member = relationship("ChainMember", back_populates="commitments")
