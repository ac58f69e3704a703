# users/urls.py

from django.urls import include, re_path
from rest_framework_simplejwt.views import TokenRefreshView

from core.routers import OptionalSlashRouter

from .views import (
    AccountRequestViewSet,
    ForgotPasswordView,
    LoginView,
    MeView,
    RegisterView,
    ResetPasswordView,
    UserViewSet,
)

router = OptionalSlashRouter()
router.register(r"auth/account-requests", AccountRequestViewSet, basename="account-requests")
router.register(r"users", UserViewSet, basename="users")

urlpatterns = [
    # ---------------- PUBLIC AUTH ----------------
    re_path(r"^auth/register/?$", RegisterView.as_view(), name="register"),
    re_path(r"^auth/login/?$", LoginView.as_view(), name="login"),
    re_path(r"^auth/token/refresh/?$", TokenRefreshView.as_view(), name="token-refresh"),
    re_path(r"^auth/forgot-password/?$", ForgotPasswordView.as_view(), name="forgot-password"),
    re_path(r"^auth/reset-password/?$", ResetPasswordView.as_view(), name="reset-password"),
    # ---------------- AUTHENTICATED ----------------
    re_path(r"^auth/me/?$", MeView.as_view(), name="me"),
    # ---------------- ADMIN ----------------
    re_path(r"^", include(router.urls)),
]
