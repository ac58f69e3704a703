# users/services/password_reset.py

"""
PASSWORD RESET (EMAILED 6-DIGIT CODE)

- issue_password_reset() never reveals whether the email exists.
- The code is stored hashed and expires after PASSWORD_RESET_CODE_TTL_MINUTES.
- A successful reset clears the code (single use).
- PASSWORD_RESET_MAX_ATTEMPTS wrong guesses revoke the code.
"""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from django.utils import timezone

from users.services.accounts import send_account_email
from users.services.exceptions import InvalidResetCodeError

logger = logging.getLogger(__name__)

User = get_user_model()

RESET_CODE_DIGITS = 6


def generate_reset_code() -> str:
    return f"{secrets.randbelow(10 ** RESET_CODE_DIGITS):0{RESET_CODE_DIGITS}d}"


def issue_password_reset(email: str) -> None:
    email = (email or "").strip()
    user = User.objects.filter(email__iexact=email, is_active=True).first()
    if user is None:
        logger.info("Password reset requested for unknown email")
        return

    ttl = int(getattr(settings, "PASSWORD_RESET_CODE_TTL_MINUTES", 15))
    code = generate_reset_code()

    user.set_reset_code(code, expires_at=timezone.now() + timedelta(minutes=ttl))
    user.save(update_fields=["reset_code", "reset_code_expires", "reset_code_attempts", "updated_at"])

    send_account_email(
        subject="Password reset code",
        message=(
            f"Your password reset code is {code}.\n"
            f"It expires in {ttl} minutes."
        ),
        recipient=user.email,
    )
    logger.info("Password reset code issued", extra={"user_id": str(user.pk)})


def _record_failed_attempt(user) -> None:
    limit = int(getattr(settings, "PASSWORD_RESET_MAX_ATTEMPTS", 5))
    user.reset_code_attempts += 1
    if user.reset_code_attempts >= limit:
        user.clear_reset_code()
        logger.warning(
            "Password reset code revoked after failed attempts",
            extra={"user_id": str(user.pk), "attempts": limit},
        )
    user.save(update_fields=["reset_code", "reset_code_expires", "reset_code_attempts", "updated_at"])


def reset_password(*, email: str, code: str, new_password: str) -> None:
    email = (email or "").strip()

    # The failed-attempt count must commit, so the error is raised after the block.
    with transaction.atomic():
        user = User.objects.select_for_update().filter(email__iexact=email).first()
        if user is None:
            raise InvalidResetCodeError()

        if user.check_reset_code(str(code or "").strip()):
            # Raises django ValidationError; the view maps it to 400.
            validate_password(new_password, user=user)

            user.set_password(new_password)
            user.clear_reset_code()
            user.save(
                update_fields=[
                    "password",
                    "reset_code",
                    "reset_code_expires",
                    "reset_code_attempts",
                    "updated_at",
                ]
            )
            logger.info("Password reset completed", extra={"user_id": str(user.pk)})
            return

        if user.reset_code:
            _record_failed_attempt(user)

    raise InvalidResetCodeError()
