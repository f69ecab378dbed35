# mentorship_api/utils/validation_utils.py
from sqlalchemy.orm import Session
from ..models import User, Role, MentorshipRequest, MentorshipStatus
from ..constants import ErrorMessages
from ..exceptions import DuplicateRequestError, InvalidPayloadError, NotFoundError

def parse_id(raw: str) -> int:
    """Parses a path identifier; anything but a positive integer is an invalid payload."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidPayloadError(f"{ErrorMessages.INVALID_ID}: {raw!r}")
    if value <= 0:
        raise InvalidPayloadError(f"{ErrorMessages.INVALID_ID}: {raw!r}")
    return value

class ValidationUtils:
    def __init__(self, db: Session):
        self.db = db

    def get_user_or_404(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError(ErrorMessages.USER_NOT_FOUND)
        return user

    def get_mentor_or_404(self, mentor_id: int) -> User:
        mentor = self.db.query(User).filter(User.id == mentor_id).first()
        if not mentor or Role.MENTOR not in mentor.role_set:
            raise NotFoundError(ErrorMessages.MENTOR_NOT_FOUND)
        return mentor

    def get_request_or_404(self, request_id: int) -> MentorshipRequest:
        request = self.db.query(MentorshipRequest).filter(MentorshipRequest.id == request_id).first()
        if not request:
            raise NotFoundError(ErrorMessages.REQUEST_NOT_FOUND)
        return request

    def check_not_self(self, mentee_id: int, mentor_id: int):
        if mentee_id == mentor_id:
            raise InvalidPayloadError(ErrorMessages.SELF_APPLICATION)

    def check_no_pending_request(self, mentee_id: int, mentor_id: int):
        existing = self.db.query(MentorshipRequest).filter(
            MentorshipRequest.mentee_id == mentee_id,
            MentorshipRequest.mentor_id == mentor_id,
            MentorshipRequest.status == MentorshipStatus.PENDING.value
        ).first()

        if existing:
            raise DuplicateRequestError(ErrorMessages.DUPLICATE_REQUEST)
