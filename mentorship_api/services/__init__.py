from .mentorship_service import MentorshipService
from .notification_service import MentorshipNotifier, NotificationSender, LoggingSender

__all__ = ["MentorshipService", "MentorshipNotifier", "NotificationSender", "LoggingSender"]
