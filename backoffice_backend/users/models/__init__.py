from .account_request import AccountRequest, AccountRequestStatus
from .user import User, UserManager

__all__ = [
    "User",
    "UserManager",
    "AccountRequest",
    "AccountRequestStatus",
]
