# users/tests/test_auth.py

from __future__ import annotations

import re
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from users.models import AccountRequest, AccountRequestStatus

User = get_user_model()

STRONG_PASSWORD = "Vx9!kettle-Orbit"


class RegisterLoginTests(TestCase):
    """
    GUARANTEES:
    - registering files an account request, not a user
    - login only works once an admin approved the request
    - login returns {token, refresh, user}; bad credentials -> 401
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass12345", role="admin"
        )

    def _register(self, email="new.clerk@example.com", password=STRONG_PASSWORD):
        return self.client.post(
            "/api/auth/register",
            {"name": "Nia", "surname": "Costa", "email": email, "password": password},
            format="json",
        )

    def test_register_files_request(self):
        res = self._register()

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertIn("requestId", res.data)
        request_obj = AccountRequest.objects.get(email="new.clerk@example.com")
        self.assertEqual(request_obj.status, AccountRequestStatus.PENDING.value)
        self.assertNotEqual(request_obj.password, STRONG_PASSWORD)
        self.assertFalse(User.objects.filter(email="new.clerk@example.com").exists())

    def test_register_weak_password(self):
        res = self._register(password="123")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(AccountRequest.objects.count(), 0)

    def test_register_duplicate_pending(self):
        self._register()

        res = self._register()

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

    def test_register_existing_user(self):
        res = self._register(email="admin@example.com")

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

    def test_approved_request_can_log_in(self):
        request_id = self._register().data["requestId"]

        self.client.force_authenticate(user=self.admin)
        with self.captureOnCommitCallbacks(execute=True):
            res = self.client.post(f"/api/auth/account-requests/{request_id}/approve")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["user"]["role"], "user")
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["new.clerk@example.com"])

        self.client.force_authenticate(user=None)
        res = self.client.post(
            "/api/auth/login",
            {"email": "New.Clerk@example.com", "password": STRONG_PASSWORD},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIn("token", res.data)
        self.assertIn("refresh", res.data)
        self.assertEqual(res.data["user"]["name"], "Nia")

        token = res.data["token"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        res = self.client.get("/api/auth/me")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res.data["authenticated"])
        self.assertEqual(res.data["user"]["email"], "new.clerk@example.com")

    def test_pending_request_cannot_log_in(self):
        self._register()

        res = self.client.post(
            "/api/auth/login",
            {"email": "new.clerk@example.com", "password": STRONG_PASSWORD},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_requires_fields(self):
        res = self.client.post("/api/auth/login", {"email": "admin@example.com"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["message"], "Email and password required")

    def test_login_wrong_password(self):
        res = self.client.post(
            "/api/auth/login", {"email": "admin@example.com", "password": "nope"}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(res.data["message"], "Invalid email or password")

    def test_login_disabled_user(self):
        self.admin.is_active = False
        self.admin.save()

        res = self.client.post(
            "/api/auth/login", {"email": "admin@example.com", "password": "pass12345"}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_refresh_token(self):
        res = self.client.post(
            "/api/auth/login", {"email": "admin@example.com", "password": "pass12345"}, format="json"
        )

        res = self.client.post("/api/auth/token/refresh", {"refresh": res.data["refresh"]}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIn("access", res.data)

    def test_me_requires_token(self):
        res = self.client.get("/api/auth/me")

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn("message", res.data)


class PasswordResetTests(TestCase):
    """
    GUARANTEES:
    - forgot-password never reveals whether an email is registered
    - the emailed code resets the password once, before it expires
    - repeated wrong guesses revoke the code
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="clerk@example.com", password="pass12345", role="user"
        )

    def _request_code(self):
        res = self.client.post("/api/auth/forgot-password", {"email": "clerk@example.com"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        return re.search(r"\b(\d{6})\b", mail.outbox[-1].body).group(1)

    def _reset(self, code, password=STRONG_PASSWORD):
        return self.client.post(
            "/api/auth/reset-password",
            {"email": "clerk@example.com", "code": code, "newPassword": password},
            format="json",
        )

    def test_unknown_email_is_silent(self):
        res = self.client.post("/api/auth/forgot-password", {"email": "ghost@example.com"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 0)

    def test_reset_with_code(self):
        code = self._request_code()

        self.user.refresh_from_db()
        self.assertNotEqual(self.user.reset_code, code)

        res = self._reset(code)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password(STRONG_PASSWORD))
        self.assertEqual(self.user.reset_code, "")

        # single use
        self.assertEqual(self._reset(code).status_code, status.HTTP_400_BAD_REQUEST)

    def test_wrong_code(self):
        code = self._request_code()
        wrong = "000000" if code != "000000" else "111111"

        res = self._reset(wrong)

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["message"], "Invalid or expired reset code")

    def test_expired_code(self):
        code = self._request_code()
        User.objects.filter(pk=self.user.pk).update(
            reset_code_expires=timezone.now() - timedelta(minutes=1)
        )

        self.assertEqual(self._reset(code).status_code, status.HTTP_400_BAD_REQUEST)

    def test_weak_new_password(self):
        code = self._request_code()

        res = self._reset(code, password="123")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("pass12345"))

    def test_code_format(self):
        res = self._reset("12ab")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    @override_settings(PASSWORD_RESET_MAX_ATTEMPTS=3)
    def test_code_revoked_after_repeated_wrong_guesses(self):
        code = self._request_code()
        wrong = "000000" if code != "000000" else "111111"

        self.assertEqual(self._reset(wrong).status_code, status.HTTP_400_BAD_REQUEST)
        self.user.refresh_from_db()
        self.assertEqual(self.user.reset_code_attempts, 1)

        self._reset(wrong)
        self._reset(wrong)

        self.user.refresh_from_db()
        self.assertEqual(self.user.reset_code, "")
        self.assertEqual(self._reset(code).status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(self.user.check_password("pass12345"))

    def test_new_code_resets_attempt_count(self):
        code = self._request_code()
        wrong = "000000" if code != "000000" else "111111"
        self._reset(wrong)

        code = self._request_code()

        self.user.refresh_from_db()
        self.assertEqual(self.user.reset_code_attempts, 0)
        self.assertEqual(self._reset(code).status_code, status.HTTP_200_OK)
