from .accounts import (
    approve_account_request,
    register_account_request,
    reject_account_request,
)
from .password_reset import issue_password_reset, reset_password

__all__ = [
    "register_account_request",
    "approve_account_request",
    "reject_account_request",
    "issue_password_reset",
    "reset_password",
]
