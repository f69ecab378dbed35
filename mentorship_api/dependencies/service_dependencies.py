# mentorship_api/dependencies/service_dependencies.py
from fastapi import Depends
from sqlalchemy.orm import Session
from ..database import get_db
from ..services.mentorship_service import MentorshipService
from ..services.notification_service import MentorshipNotifier, NotificationSender, LoggingSender

def get_notification_sender() -> NotificationSender:
    return LoggingSender()

def get_notifier(sender: NotificationSender = Depends(get_notification_sender)) -> MentorshipNotifier:
    return MentorshipNotifier(sender)

def get_mentorship_service(
    db: Session = Depends(get_db),
    notifier: MentorshipNotifier = Depends(get_notifier),
) -> MentorshipService:
    return MentorshipService(db, notifier)
