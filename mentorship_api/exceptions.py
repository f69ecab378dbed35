# mentorship_api/exceptions.py
class BusinessLogicError(Exception):
    """Base exception for business logic errors"""
    pass

class NotFoundError(BusinessLogicError):
    """Raised when a resource is not found"""
    pass

class InvalidPayloadError(BusinessLogicError):
    """Raised when an identifier or request body is malformed"""
    pass

class UnauthorizedError(BusinessLogicError):
    """Raised when the actor has no relation to the resource"""
    pass

class InvalidStatusTransitionError(BusinessLogicError):
    """Raised when invalid status transition is attempted"""
    pass

class DuplicateRequestError(BusinessLogicError):
    """Raised when duplicate request is attempted"""
    pass

class NotificationError(BusinessLogicError):
    """Raised when a notification could not be dispatched"""
    pass
