from fastapi import HTTPException, status


class PaymentError(HTTPException):
    """
    Base class for checkout and verification failures.

    Rendered as ``{"error": detail}`` by the handler registered in main.py.
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(status_code=self.status_code, detail=message)


class PaymentConfigurationError(PaymentError):
    """Exception raised when gateway credentials are not configured."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Razorpay credentials not configured"):
        super().__init__(message)


class GatewayError(PaymentError):
    """Exception raised when the payment gateway rejects a request."""

    status_code = status.HTTP_502_BAD_GATEWAY


class InvalidSignatureError(PaymentError):
    """Exception raised when a payment signature does not match."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Invalid payment signature"):
        super().__init__(message)


class InvalidPaymentRequestError(PaymentError):
    """Exception raised for incomplete verification payloads."""

    status_code = status.HTTP_400_BAD_REQUEST


class ProfileNotFoundError(PaymentError):
    """Exception raised when no profile matches the paying user."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "User profile not found"):
        super().__init__(message)


class PaymentPersistenceError(PaymentError):
    """Exception raised when a payment or subscription write fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class AuthenticationError(HTTPException):
    """Exception raised for authentication failures."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"}
        )


class AuthorizationError(HTTPException):
    """Exception raised for authorization failures."""

    def __init__(self, message: str = "Not authorized to access this resource"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=message
        )


class EntitlementRequiredError(HTTPException):
    """Exception raised when a feature needs a plan the user does not hold."""

    def __init__(self, message: str = "An active Pro plan is required"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=message
        )


class InterviewGenerationError(HTTPException):
    """Exception raised when the LLM backend cannot be used."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Interview generation failed: {message}"
        )


class ResumeParsingError(HTTPException):
    """Exception raised when a resume cannot be turned into text."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Failed to process resume: {message}"
        )
