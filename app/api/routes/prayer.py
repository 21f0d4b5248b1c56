# app/api/routes/prayer.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_prayer_service
from app.core.security import get_current_user
from app.models.prayer import PrayerRequest
from app.models.user import User
from app.schemas.prayer import (
    MarkAnsweredRequest,
    PrayerLogResponse,
    PrayerRequestCreate,
    PrayerRequestResponse,
    PrayerRequestUpdate,
)
from app.services.prayer_service import PrayerService

router = APIRouter()


def to_response(prayer_request: PrayerRequest, current_user_id: Optional[int] = None) -> PrayerRequestResponse:
    """Serialize without the owner id; the caller only learns whether it is theirs"""
    response = PrayerRequestResponse.model_validate(prayer_request)
    if current_user_id is not None:
        response.is_mine = prayer_request.user_id == current_user_id
    return response


@router.post("", response_model=PrayerRequestResponse, status_code=status.HTTP_201_CREATED)
def create_prayer_request(
        data: PrayerRequestCreate,
        service: PrayerService = Depends(get_prayer_service),
        current_user: User = Depends(get_current_user)
):
    prayer_request = service.create_prayer_request(current_user.id, data)
    return to_response(prayer_request, current_user.id)


@router.get("", response_model=List[PrayerRequestResponse])
def read_prayer_requests(
        service: PrayerService = Depends(get_prayer_service),
        current_user: User = Depends(get_current_user)
):
    """Get every prayer request, newest first"""
    return [to_response(pr, current_user.id) for pr in service.get_all_prayer_requests()]


@router.get("/my-requests", response_model=List[PrayerRequestResponse])
def read_my_prayer_requests(
        service: PrayerService = Depends(get_prayer_service),
        current_user: User = Depends(get_current_user)
):
    return [to_response(pr, current_user.id) for pr in service.get_user_prayer_requests(current_user.id)]


@router.get("/my-prayers", response_model=List[PrayerLogResponse])
def read_my_prayers(
        service: PrayerService = Depends(get_prayer_service),
        current_user: User = Depends(get_current_user)
):
    """Get the requests the caller has prayed for, most recent prayer first"""
    return service.get_my_prayers(current_user.id)


@router.get("/answered", response_model=List[PrayerRequestResponse])
def read_answered_prayers(
        service: PrayerService = Depends(get_prayer_service),
        current_user: User = Depends(get_current_user)
):
    return [to_response(pr, current_user.id) for pr in service.get_answered_prayers()]


@router.get("/{prayer_request_id}", response_model=PrayerRequestResponse)
def read_prayer_request(
        prayer_request_id: int,
        service: PrayerService = Depends(get_prayer_service),
        current_user: User = Depends(get_current_user)
):
    return to_response(service.get_prayer_request(prayer_request_id), current_user.id)


@router.put("/{prayer_request_id}", response_model=PrayerRequestResponse)
def update_prayer_request(
        prayer_request_id: int,
        data: PrayerRequestUpdate,
        service: PrayerService = Depends(get_prayer_service),
        current_user: User = Depends(get_current_user)
):
    """Update a prayer request - owner only"""
    prayer_request = service.update_prayer_request(prayer_request_id, current_user.id, data)
    return to_response(prayer_request, current_user.id)


@router.delete("/{prayer_request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_prayer_request(
        prayer_request_id: int,
        service: PrayerService = Depends(get_prayer_service),
        current_user: User = Depends(get_current_user)
):
    """Delete a prayer request - owner only"""
    service.delete_prayer_request(prayer_request_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{prayer_request_id}/pray", response_model=PrayerRequestResponse)
def pray_for_request(
        prayer_request_id: int,
        service: PrayerService = Depends(get_prayer_service),
        current_user: User = Depends(get_current_user)
):
    """Record one prayer by the caller; a second attempt is a 409"""
    prayer_request = service.pray_for_request(prayer_request_id, current_user.id)
    return to_response(prayer_request, current_user.id)


@router.post("/{prayer_request_id}/answer", response_model=PrayerRequestResponse)
def mark_as_answered(
        prayer_request_id: int,
        data: MarkAnsweredRequest,
        service: PrayerService = Depends(get_prayer_service),
        current_user: User = Depends(get_current_user)
):
    """Mark a prayer request as answered with a testimony - owner only"""
    prayer_request = service.mark_as_answered(prayer_request_id, current_user.id, data.testimony)
    return to_response(prayer_request, current_user.id)


@router.get("/{prayer_request_id}/prayers", response_model=List[PrayerLogResponse])
def read_prayers_for_request(
        prayer_request_id: int,
        service: PrayerService = Depends(get_prayer_service),
        current_user: User = Depends(get_current_user)
):
    return [
        PrayerLogResponse(
            id=log.id,
            prayer_request_id=log.prayer_request_id,
            user_id=log.user_id,
            prayed_at=log.prayed_at,
        )
        for log in service.get_prayers_for_request(prayer_request_id)
    ]
