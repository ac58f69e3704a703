# users/views/account_requests.py

"""
ADMIN: ACCOUNT REQUEST REVIEW

GET  /api/auth/account-requests?status=pending|approved|rejected
POST /api/auth/account-requests/<id>/approve
POST /api/auth/account-requests/<id>/reject
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import CAP_USERS_MANAGE, HasCapability
from users.models import AccountRequest, AccountRequestStatus
from users.serializers import AccountRequestSerializer, UserSerializer
from users.services import approve_account_request, reject_account_request


class AccountRequestViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    serializer_class = AccountRequestSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_USERS_MANAGE

    pagination_results_key = "requests"
    lookup_value_regex = "[0-9a-fA-F-]{32,36}"

    def get_queryset(self):
        qs = AccountRequest.objects.select_related("reviewed_by").order_by("-created_at")

        wanted = (self.request.query_params.get("status") or "").strip().lower()
        if wanted:
            if wanted not in AccountRequestStatus.values:
                raise ValidationError(
                    {"status": f"Must be one of {', '.join(AccountRequestStatus.values)}"}
                )
            qs = qs.filter(status=wanted)
        return qs

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        user = approve_account_request(pk, reviewer=request.user)
        return Response(
            {"message": "Account request approved", "user": UserSerializer(user).data},
            status=status.HTTP_200_OK,
        )

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        account_request = reject_account_request(pk, reviewer=request.user)
        return Response(
            {
                "message": "Account request rejected",
                "request": AccountRequestSerializer(account_request).data,
            },
            status=status.HTTP_200_OK,
        )
