from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    INVALID_TOKEN = ErrorDefinition("INVALID_TOKEN", "Invalid token", status.HTTP_401_UNAUTHORIZED)
    PERMISSION_DENIED = ErrorDefinition(
        "PERMISSION_DENIED",
        "Permission denied",
        status.HTTP_403_FORBIDDEN,
    )
    CATEGORY_NOT_FOUND = ErrorDefinition(
        "CATEGORY_NOT_FOUND",
        "Category not found",
        status.HTTP_404_NOT_FOUND,
    )
    LINK_NOT_FOUND = ErrorDefinition(
        "LINK_NOT_FOUND",
        "Link not found",
        status.HTTP_404_NOT_FOUND,
    )
    GROUP_NOT_FOUND = ErrorDefinition(
        "GROUP_NOT_FOUND",
        "Group not found",
        status.HTTP_404_NOT_FOUND,
    )
    ONLY_ONE_PUBLIC_CATEGORY_IS_ALLOWED = ErrorDefinition(
        "ONLY_ONE_PUBLIC_CATEGORY_IS_ALLOWED",
        "Only one public category is allowed",
        status.HTTP_400_BAD_REQUEST,
    )
    CATEGORY_REFERENCE_NOT_FOUND = ErrorDefinition(
        "CATEGORY_REFERENCE_NOT_FOUND",
        "Referenced category does not exist",
        status.HTTP_400_BAD_REQUEST,
    )
    MAX_OWNED_GROUPS_REACHED = ErrorDefinition(
        "MAX_OWNED_GROUPS_REACHED",
        "The maximum number of groups has been reached",
        status.HTTP_400_BAD_REQUEST,
    )
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    MENU_TIMEOUT = ErrorDefinition(
        "MENU_TIMEOUT",
        "Menu resolution timed out",
        status.HTTP_504_GATEWAY_TIMEOUT,
    )
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)
