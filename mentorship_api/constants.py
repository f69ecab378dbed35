# mentorship_api/constants.py
class ErrorMessages:
    USER_NOT_FOUND = "User not found"
    MENTOR_NOT_FOUND = "Mentor not found"
    REQUEST_NOT_FOUND = "Mentorship request not found"
    INVALID_ID = "Invalid identifier"
    INVALID_PAYLOAD = "Invalid payload"
    SELF_APPLICATION = "You cannot apply to yourself"
    DUPLICATE_REQUEST = "A pending request already exists for this mentor"
    UNAUTHORIZED_REQUEST = "Not authorized to access this mentorship request"
    UNAUTHORIZED_LISTING = "Not authorized to list these requests"
    CONCURRENT_UPDATE = "Request was updated by someone else"

class NotificationTemplates:
    REQUESTED = "mentorship-requested"
    ACCEPTED = "mentorship-accepted"
    DECLINED = "mentorship-declined"
    CANCELLED = "mentorship-cancelled"

class BusinessRules:
    MIN_PASSWORD_LENGTH = 6
    MIN_USERNAME_LENGTH = 3
    MAX_USERNAME_LENGTH = 50
    MAX_MESSAGE_LENGTH = 400
