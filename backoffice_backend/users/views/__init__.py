from .account_requests import AccountRequestViewSet
from .auth import (
    ForgotPasswordView,
    LoginView,
    RegisterView,
    ResetPasswordView,
)
from .me import MeView
from .users import UserViewSet

__all__ = [
    "RegisterView",
    "LoginView",
    "ForgotPasswordView",
    "ResetPasswordView",
    "MeView",
    "AccountRequestViewSet",
    "UserViewSet",
]
