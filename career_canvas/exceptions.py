# career_canvas/exceptions.py
from typing import Any, Dict, Optional


class BusinessLogicError(Exception):
    """Base exception for business logic errors"""
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Error body used in the failure envelope"""
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            error["details"] = self.details
        return error


class InvalidInputError(BusinessLogicError):
    """Raised when a required field is missing or empty"""
    code = "VALIDATION_ERROR"
    status_code = 400


class AuthenticationRequiredError(BusinessLogicError):
    """Raised when the bearer token is missing or invalid"""
    code = "AUTH_REQUIRED"
    status_code = 401


class OAuthError(AuthenticationRequiredError):
    """Raised when the identity provider handshake fails"""
    pass


class UnauthorizedError(BusinessLogicError):
    """Raised when user lacks authorization"""
    code = "FORBIDDEN"
    status_code = 403


class NotFoundError(BusinessLogicError):
    """Raised when a resource is not found"""
    code = "NOT_FOUND"
    status_code = 404


class ProfileAlreadyExistsError(BusinessLogicError):
    """Raised when trying to create duplicate profile"""
    code = "CONFLICT"
    status_code = 409


class InternalError(BusinessLogicError):
    """Raised when the data layer or an unexpected dependency fails"""
    pass
