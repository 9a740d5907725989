"""Shared exceptions module."""

from typing import Optional

from pydantic import ValidationError


class PromptOpsException(Exception):
    """Base exception for PromptOps services."""

    pass


class NotFoundException(PromptOpsException):
    """Exception raised when an object is not found."""

    def __init__(self, message: Optional[str] = "Object not found"):
        """Create a new NotFoundException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class DomainValidationError(PromptOpsException):
    """Exception raised when a request is well formed but breaks a business rule.

    Examples are an unknown billing plan or an experiment without enough variants.
    """

    def __init__(self, message: Optional[str] = "Invalid request"):
        """Create a new DomainValidationError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class InvalidStateError(PromptOpsException):
    """Exception raised when an object is in a state that does not allow the operation."""

    def __init__(self, message: Optional[str] = "Object is in an invalid state"):
        """Create a new InvalidStateError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class ConflictException(PromptOpsException):
    """Exception raised when a write collides with a uniqueness or reference constraint."""

    def __init__(self, message: Optional[str] = "Resource conflicts with an existing one"):
        """Create a new ConflictException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class ExternalServiceError(PromptOpsException):
    """Exception raised when an external service fails."""

    def __init__(self, service_name: str, message: Optional[str] = "External service failed"):
        """Create a new ExternalServiceError instance.

        Args:
        ----
            service_name (str): The name of the external service.
            message (str, optional): The error message. Has default message.

        """
        self.service_name = service_name
        self.message = message
        super().__init__(f"{service_name}: {message}")


def unpack_validation_error(exc: ValidationError) -> dict:
    """Unpack a Pydantic validation error into a dictionary.

    Args:
    ----
        exc (ValidationError): The Pydantic validation error.

    Returns:
    -------
        dict: The dictionary representation of the validation error.

    """
    error_messages = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        message = error["msg"]
        error_messages.append({field: message})

    return {"errors": error_messages}
