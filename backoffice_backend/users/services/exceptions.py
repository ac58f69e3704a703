# users/services/exceptions.py

from core.exceptions import (
    BusinessRuleError,
    ConflictError,
    InputValidationError,
    NotFoundError,
)


class AccountExistsError(ConflictError):
    default_message = "An account or pending request already exists for this email"


class AccountRequestNotFoundError(NotFoundError):
    default_message = "Account request not found"


class AccountRequestAlreadyReviewedError(BusinessRuleError):
    def __init__(self, status):
        super().__init__(f"Account request is already {status}", status=status)


class InvalidResetCodeError(InputValidationError):
    default_message = "Invalid or expired reset code"


class SelfDeletionError(BusinessRuleError):
    default_message = "You cannot delete your own account"
