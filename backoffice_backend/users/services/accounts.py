# users/services/accounts.py

"""
ACCOUNT APPROVAL WORKFLOW

register_account_request() -> pending AccountRequest
approve_account_request()  -> User created with the requested (hashed) password
reject_account_request()   -> request closed; the email may register again

Notification emails are sent after the transaction commits and never
fail the request.
"""

from __future__ import annotations

import logging
from smtplib import SMTPException

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password
from django.core.exceptions import ValidationError
from django.core.mail import send_mail
from django.db import transaction
from django.utils import timezone

from permissions.roles import ROLE_USER
from users.models import AccountRequest, AccountRequestStatus
from users.services.exceptions import (
    AccountExistsError,
    AccountRequestAlreadyReviewedError,
    AccountRequestNotFoundError,
)

logger = logging.getLogger(__name__)

User = get_user_model()


def send_account_email(*, subject: str, message: str, recipient: str) -> None:
    try:
        send_mail(
            subject,
            message,
            settings.DEFAULT_FROM_EMAIL,
            [recipient],
            fail_silently=False,
        )
    except (SMTPException, OSError):
        logger.exception("Failed to send account email", extra={"recipient": recipient})


@transaction.atomic
def register_account_request(*, name: str, surname: str, email: str, password: str) -> AccountRequest:
    email = User.objects.normalize_email(email).strip()

    if User.objects.filter(email__iexact=email).exists():
        raise AccountExistsError()

    existing = AccountRequest.objects.select_for_update().filter(email__iexact=email).first()
    if existing and existing.status != AccountRequestStatus.REJECTED.value:
        raise AccountExistsError()

    if existing:
        # A rejected email may apply again; the old request is reopened.
        request_obj = existing
        request_obj.reviewed_at = None
        request_obj.reviewed_by = None
    else:
        request_obj = AccountRequest(email=email)

    request_obj.name = name.strip()
    request_obj.surname = surname.strip()
    request_obj.password = make_password(password)
    request_obj.status = AccountRequestStatus.PENDING.value
    request_obj.save()

    logger.info("Account request filed", extra={"account_request_id": str(request_obj.pk)})
    return request_obj


def _get_pending_for_update(request_id) -> AccountRequest:
    try:
        request_obj = AccountRequest.objects.select_for_update().get(pk=request_id)
    except (AccountRequest.DoesNotExist, ValidationError, ValueError) as exc:
        raise AccountRequestNotFoundError() from exc

    if request_obj.status != AccountRequestStatus.PENDING.value:
        raise AccountRequestAlreadyReviewedError(request_obj.status)
    return request_obj


def approve_account_request(request_id, *, reviewer) -> User:
    with transaction.atomic():
        request_obj = _get_pending_for_update(request_id)

        if User.objects.filter(email__iexact=request_obj.email).exists():
            raise AccountExistsError()

        user = User(
            email=request_obj.email,
            first_name=request_obj.name,
            last_name=request_obj.surname,
            role=ROLE_USER,
            is_active=True,
        )
        # Already hashed when the request was filed.
        user.password = request_obj.password
        user.save()

        request_obj.status = AccountRequestStatus.APPROVED.value
        request_obj.reviewed_at = timezone.now()
        request_obj.reviewed_by = reviewer
        request_obj.save(update_fields=["status", "reviewed_at", "reviewed_by"])

        transaction.on_commit(
            lambda: send_account_email(
                subject="Your account has been approved",
                message=(
                    f"Hello {user.first_name},\n\n"
                    "Your account request has been approved. You can now sign in "
                    f"with {user.email}."
                ),
                recipient=user.email,
            )
        )

    logger.info(
        "Account request approved",
        extra={"account_request_id": str(request_obj.pk), "user_id": str(user.pk)},
    )
    return user


def reject_account_request(request_id, *, reviewer) -> AccountRequest:
    with transaction.atomic():
        request_obj = _get_pending_for_update(request_id)

        request_obj.status = AccountRequestStatus.REJECTED.value
        request_obj.reviewed_at = timezone.now()
        request_obj.reviewed_by = reviewer
        request_obj.save(update_fields=["status", "reviewed_at", "reviewed_by"])

        transaction.on_commit(
            lambda: send_account_email(
                subject="Your account request",
                message=(
                    f"Hello {request_obj.name},\n\n"
                    "Your account request has been reviewed and was not approved."
                ),
                recipient=request_obj.email,
            )
        )

    logger.info("Account request rejected", extra={"account_request_id": str(request_obj.pk)})
    return request_obj
