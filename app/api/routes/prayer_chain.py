# app/api/routes/prayer_chain.py
from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_prayer_chain_service
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.prayer_chain import (
    CommitToPrayRequest,
    MessageResponse,
    PrayerChainCreate,
    PrayerChainDetail,
    PrayerChainResponse,
    PrayerChainUpdate,
)
from app.services.prayer_chain_service import PrayerChainService

router = APIRouter()


@router.post("", response_model=PrayerChainResponse, status_code=status.HTTP_201_CREATED)
def create_prayer_chain(
        data: PrayerChainCreate,
        service: PrayerChainService = Depends(get_prayer_chain_service),
        current_user: User = Depends(get_current_user)
):
    """Create a prayer chain; the creator becomes its first member"""
    return service.create_prayer_chain(current_user.id, data)


@router.get("", response_model=List[PrayerChainResponse])
def read_prayer_chains(
        service: PrayerChainService = Depends(get_prayer_chain_service),
        current_user: User = Depends(get_current_user)
):
    return service.get_all_prayer_chains()


@router.get("/my-chains", response_model=List[PrayerChainResponse])
def read_my_prayer_chains(
        service: PrayerChainService = Depends(get_prayer_chain_service),
        current_user: User = Depends(get_current_user)
):
    """Get the chains the caller belongs to"""
    return service.get_user_prayer_chains(current_user.id)


@router.post("/commit", response_model=MessageResponse)
def commit_to_pray(
        data: CommitToPrayRequest,
        service: PrayerChainService = Depends(get_prayer_chain_service),
        current_user: User = Depends(get_current_user)
):
    service.commit_to_pray(current_user.id, data.chain_id, data.pray_for_user_id)
    return {"message": "successfully committed to pray"}


@router.get("/{chain_id}", response_model=PrayerChainDetail)
def read_prayer_chain(
        chain_id: int,
        service: PrayerChainService = Depends(get_prayer_chain_service),
        current_user: User = Depends(get_current_user)
):
    """Get a chain with its creator, members and their commitments"""
    return service.get_chain_with_details(chain_id)


@router.put("/{chain_id}", response_model=PrayerChainResponse)
def update_prayer_chain(
        chain_id: int,
        data: PrayerChainUpdate,
        service: PrayerChainService = Depends(get_prayer_chain_service),
        current_user: User = Depends(get_current_user)
):
    """Update a prayer chain - creator only"""
    return service.update_prayer_chain(chain_id, current_user.id, data)


@router.delete("/{chain_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_prayer_chain(
        chain_id: int,
        service: PrayerChainService = Depends(get_prayer_chain_service),
        current_user: User = Depends(get_current_user)
):
    """Delete a prayer chain - creator only"""
    service.delete_prayer_chain(chain_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{chain_id}/join", response_model=MessageResponse)
def join_prayer_chain(
        chain_id: int,
        service: PrayerChainService = Depends(get_prayer_chain_service),
        current_user: User = Depends(get_current_user)
):
    service.join_chain(current_user.id, chain_id)
    return {"message": "successfully joined prayer chain"}


@router.post("/{chain_id}/leave", response_model=MessageResponse)
def leave_prayer_chain(
        chain_id: int,
        service: PrayerChainService = Depends(get_prayer_chain_service),
        current_user: User = Depends(get_current_user)
):
    """Leave a chain; commitments made by or for the caller in it are removed too"""
    service.leave_chain(current_user.id, chain_id)
    return {"message": "successfully left prayer chain"}


@router.delete("/{chain_id}/commit/{user_id}", response_model=MessageResponse)
def remove_commitment(
        chain_id: int,
        user_id: int,
        service: PrayerChainService = Depends(get_prayer_chain_service),
        current_user: User = Depends(get_current_user)
):
    service.remove_commitment(current_user.id, chain_id, user_id)
    return {"message": "commitment removed"}
