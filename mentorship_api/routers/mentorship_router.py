# mentorship_api/routers/mentorship_router.py
from fastapi import APIRouter, Depends, HTTPException, Path
from typing import List

from ..services import MentorshipService
from ..core.transitions import Actor
from ..dependencies.auth_dependencies import get_current_actor
from ..dependencies.service_dependencies import get_mentorship_service
from ..security import get_current_user
from ..utils.response_enricher import ResponseEnricher
from ..utils.validation_utils import parse_id
from ..schemas import MentorshipApply, MentorshipRequestResponse, MentorshipStatusUpdate, MentorshipUpdateResponse
from ..models import User
from ..exceptions import (
    BusinessLogicError,
    DuplicateRequestError,
    InvalidPayloadError,
    InvalidStatusTransitionError,
    NotFoundError,
    UnauthorizedError,
)

router = APIRouter(prefix="/mentorships", tags=["mentorship"])

ERROR_STATUS_CODES = [
    (NotFoundError, 404),
    (InvalidPayloadError, 400),
    (UnauthorizedError, 401),
    (InvalidStatusTransitionError, 400),
    (DuplicateRequestError, 409),
]

def _http_error(e: BusinessLogicError) -> HTTPException:
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(e, error_class):
            return HTTPException(status_code=status_code, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))

@router.post("/{mentor_id}/apply", response_model=MentorshipRequestResponse, status_code=201)
async def apply_for_mentorship(
    data: MentorshipApply,
    mentor_id: str = Path(..., description="The user ID of the mentor"),
    current_user: User = Depends(get_current_user),
    mentorship_service: MentorshipService = Depends(get_mentorship_service),
):
    """Apply to a mentor; creates a PENDING request"""
    try:
        request = mentorship_service.create_request(current_user, parse_id(mentor_id), data)
        return ResponseEnricher.enrich_single_request(request, current_user.id)
    except BusinessLogicError as e:
        raise _http_error(e)

@router.get("/requests/{request_id}", response_model=MentorshipRequestResponse)
async def get_mentorship_request(
    request_id: str = Path(..., description="The ID of the mentorship request"),
    actor: Actor = Depends(get_current_actor),
    mentorship_service: MentorshipService = Depends(get_mentorship_service),
):
    """Get a single request; visible to its mentor, its mentee or an admin"""
    try:
        request = mentorship_service.get_request(parse_id(request_id), actor)
        return ResponseEnricher.enrich_single_request(request, actor.id)
    except BusinessLogicError as e:
        raise _http_error(e)

@router.get("/{user_id}/requests", response_model=List[MentorshipRequestResponse])
async def get_user_requests(
    user_id: str = Path(..., description="The user whose requests are listed"),
    actor: Actor = Depends(get_current_actor),
    mentorship_service: MentorshipService = Depends(get_mentorship_service),
):
    """Get all requests where the user is mentor or mentee"""
    try:
        parsed_user_id = parse_id(user_id)
        requests = mentorship_service.get_requests_for_user(parsed_user_id, actor)
        return ResponseEnricher.enrich_requests(requests, parsed_user_id)
    except BusinessLogicError as e:
        raise _http_error(e)

@router.put("/{mentor_id}/requests/{request_id}", response_model=MentorshipUpdateResponse)
async def update_request_status(
    data: MentorshipStatusUpdate,
    mentor_id: str = Path(..., description="The user ID of the mentor"),
    request_id: str = Path(..., description="The ID of the mentorship request"),
    actor: Actor = Depends(get_current_actor),
    mentorship_service: MentorshipService = Depends(get_mentorship_service),
):
    """Approve, reject or cancel a mentorship request"""
    try:
        parse_id(mentor_id)
        request = mentorship_service.update_status(parse_id(request_id), actor, data.status, data.reason)
        return {"success": True, "mentorship": ResponseEnricher.enrich_single_request(request, actor.id)}
    except BusinessLogicError as e:
        raise _http_error(e)
