# mentorship_api/services/mentorship_service.py
from typing import List, Optional
import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..constants import ErrorMessages
from ..core.transitions import (
    Actor,
    MentorshipRecord,
    TransitionAccepted,
    TransitionErrorKind,
    TransitionRejected,
    authorize,
    relations_for,
)
from ..exceptions import (
    BusinessLogicError,
    DuplicateRequestError,
    InvalidStatusTransitionError,
    NotificationError,
    UnauthorizedError,
)
from ..models import MentorshipRequest, MentorshipStatus, User
from ..schemas import MentorshipApply
from ..utils.validation_utils import ValidationUtils
from .notification_service import MentorshipNotifier

logger = logging.getLogger(__name__)

# authorize only rejects on relation and transition grounds
REJECTION_ERRORS = {
    TransitionErrorKind.UNAUTHORIZED: UnauthorizedError,
    TransitionErrorKind.INVALID_TRANSITION: InvalidStatusTransitionError,
}

class MentorshipService:
    def __init__(self, db: Session, notifier: MentorshipNotifier):
        self.db = db
        self.notifier = notifier
        self.validator = ValidationUtils(db)

    def create_request(self, mentee: User, mentor_id: int, data: MentorshipApply) -> MentorshipRequest:
        """Creates a PENDING mentorship request from ``mentee`` to the mentor"""
        mentor = self.validator.get_mentor_or_404(mentor_id)
        self.validator.check_not_self(mentee.id, mentor.id)
        self.validator.check_no_pending_request(mentee.id, mentor.id)

        request = MentorshipRequest(
            mentor_id=mentor.id,
            mentee_id=mentee.id,
            status=MentorshipStatus.PENDING.value,
            message=data.message,
            background=data.background,
            expectation=data.expectation,
        )
        try:
            self.db.add(request)
            self.db.commit()
            self.db.refresh(request)
        except IntegrityError as e:
            # A concurrent apply inserted the pending request first
            self.db.rollback()
            logger.warning(f"Duplicate pending request for mentee {mentee.id} -> mentor {mentor.id}: {e}")
            raise DuplicateRequestError(ErrorMessages.DUPLICATE_REQUEST)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error creating mentorship request: {e}")
            raise BusinessLogicError("Database error occurred while creating mentorship request")

        logger.info(f"Mentorship request {request.id} created: mentee {mentee.id} -> mentor {mentor.id}")
        self._notify(self.notifier.notify_new_request, request)
        return request

    def update_status(
        self,
        request_id: int,
        actor: Actor,
        status: MentorshipStatus,
        reason: Optional[str] = None,
    ) -> MentorshipRequest:
        """Resolves, authorizes, conditionally persists and notifies one status change.

        The write only applies if the row still holds the status that was
        authorized against; a concurrent writer turns this attempt into an
        invalid transition. The notification is sent once, after commit, and
        its failure does not undo the transition.
        """
        request = self.validator.get_request_or_404(request_id)
        record = MentorshipRecord.from_model(request)

        decision = authorize(record, actor.id, actor.roles, status, reason)
        if isinstance(decision, TransitionRejected):
            logger.info(
                f"Rejected transition of request {record.id} ({record.status.value} -> {status.value}) "
                f"by user {actor.id}: {decision.kind.value}"
            )
            raise REJECTION_ERRORS[decision.kind](decision.detail)

        self._commit_transition(decision)
        self.db.refresh(request)
        logger.info(
            f"Request {record.id} moved {decision.previous_status.value} -> {decision.record.status.value} by user {actor.id}"
        )

        self._notify(self.notifier.notify_transition, request, actor.id)
        return request

    def get_request(self, request_id: int, actor: Actor) -> MentorshipRequest:
        """Returns a request visible to its mentor, its mentee or an admin"""
        request = self.validator.get_request_or_404(request_id)
        if not relations_for(MentorshipRecord.from_model(request), actor.id, actor.roles):
            raise UnauthorizedError(ErrorMessages.UNAUTHORIZED_REQUEST)
        return request

    def get_requests_for_user(self, user_id: int, actor: Actor) -> List[MentorshipRequest]:
        """All requests where the user is mentor or mentee, newest first"""
        if actor.id != user_id and not actor.is_admin:
            raise UnauthorizedError(ErrorMessages.UNAUTHORIZED_LISTING)
        self.validator.get_user_or_404(user_id)

        return self.db.query(MentorshipRequest).options(
            joinedload(MentorshipRequest.mentor),
            joinedload(MentorshipRequest.mentee),
        ).filter(
            or_(MentorshipRequest.mentor_id == user_id, MentorshipRequest.mentee_id == user_id)
        ).order_by(MentorshipRequest.created_at.desc(), MentorshipRequest.id.desc()).all()

    def _commit_transition(self, decision: TransitionAccepted) -> None:
        updated = decision.record
        try:
            affected = self.db.query(MentorshipRequest).filter(
                MentorshipRequest.id == updated.id,
                MentorshipRequest.status == decision.previous_status.value,
            ).update(
                {"status": updated.status.value, "reason": updated.reason},
                synchronize_session=False,
            )
            if affected != 1:
                self.db.rollback()
                logger.warning(f"Request {updated.id} changed concurrently; transition to {updated.status.value} dropped")
                raise InvalidStatusTransitionError(ErrorMessages.CONCURRENT_UPDATE)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error updating request {updated.id}: {e}")
            raise BusinessLogicError("Database error occurred while updating mentorship request")

    def _notify(self, send, request: MentorshipRequest, *args) -> None:
        try:
            send(request, *args)
        except NotificationError as e:
            logger.error(f"Notification for request {request.id} failed: {e}")
