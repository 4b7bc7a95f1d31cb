from typing import Any


class CoreException(Exception):
    def __init__(
        self, message: str | None = None, additional_info: dict[str, Any] | None = None
    ):
        self.message = message
        self.additional_info = additional_info


class InfrastructureException(CoreException):
    pass


class InstanceNotFoundException(CoreException):
    pass


class InstanceAlreadyExistsException(CoreException):
    pass


class DuplicateFieldException(InstanceAlreadyExistsException):
    """A write was rejected because a unique field value is already taken.

    Rendered to clients exactly like a request validation error on that field.
    """

    def __init__(
        self,
        field: str,
        value: Any,
        message: str | None = None,
        location: str = "body",
        additional_info: dict[str, Any] | None = None,
    ):
        super().__init__(
            message or f"{field.capitalize()} already exists", additional_info
        )
        self.field = field
        self.value = value
        self.location = location
