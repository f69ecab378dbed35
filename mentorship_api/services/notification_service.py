# mentorship_api/services/notification_service.py
from typing import Any, Dict, Optional
import logging

from ..config import get_settings
from ..constants import NotificationTemplates
from ..exceptions import NotificationError
from ..models import MentorshipRequest, MentorshipStatus, User

logger = logging.getLogger(__name__)

class NotificationSender:
    """Delivery backend. Implementations send one templated message per call."""

    def send_local_template(self, recipient: User, template_name: str, context: Dict[str, Any]) -> None:
        raise NotImplementedError

class LoggingSender(NotificationSender):
    """Default backend: records the dispatch in the application log."""

    def __init__(self, from_address: Optional[str] = None):
        self.from_address = from_address or get_settings().NOTIFICATION_FROM_ADDRESS

    def send_local_template(self, recipient: User, template_name: str, context: Dict[str, Any]) -> None:
        logger.info(
            "Notification '%s' from %s to user %s <%s>: %s",
            template_name, self.from_address, recipient.id, recipient.email or recipient.username, context,
        )

# New status -> (template, which side of the request receives it)
TRANSITION_TEMPLATES = {
    MentorshipStatus.APPROVED: (NotificationTemplates.ACCEPTED, "mentee"),
    MentorshipStatus.REJECTED: (NotificationTemplates.DECLINED, "mentee"),
    MentorshipStatus.CANCELLED: (NotificationTemplates.CANCELLED, "mentor"),
}

class MentorshipNotifier:
    def __init__(self, sender: NotificationSender):
        self.sender = sender
        self.settings = get_settings()

    def notify_new_request(self, request: MentorshipRequest) -> None:
        """Tells the mentor a mentee has applied"""
        context = self._base_context(request)
        context["message"] = request.message
        self._send(request.mentor, NotificationTemplates.REQUESTED, context)

    def notify_transition(self, request: MentorshipRequest, actor_id: int) -> None:
        """Dispatches the single notification that follows a committed status change"""
        status = MentorshipStatus(request.status)
        if status not in TRANSITION_TEMPLATES:
            raise NotificationError(f"No notification defined for status {status.value}")

        template_name, side = TRANSITION_TEMPLATES[status]
        recipient = request.mentee if side == "mentee" else request.mentor
        context = self._base_context(request)
        context["actor_id"] = actor_id
        if status == MentorshipStatus.REJECTED:
            context["reason"] = request.reason
        self._send(recipient, template_name, context)

    def _base_context(self, request: MentorshipRequest) -> Dict[str, Any]:
        return {
            "request_id": request.id,
            "mentor_name": request.mentor.username if request.mentor else None,
            "mentee_name": request.mentee.username if request.mentee else None,
        }

    def _send(self, recipient: Optional[User], template_name: str, context: Dict[str, Any]) -> None:
        if not self.settings.NOTIFICATIONS_ENABLED:
            logger.debug(f"Notifications disabled; skipping '{template_name}'")
            return
        if recipient is None:
            raise NotificationError(f"No recipient for '{template_name}'")
        try:
            self.sender.send_local_template(recipient, template_name, context)
        except Exception as e:
            raise NotificationError(f"Failed to send '{template_name}' to user {recipient.id}: {e}") from e
