# users/views/users.py

"""
ADMIN: USER DIRECTORY

GET    /api/users
DELETE /api/users/<id>     (an admin cannot delete their own account)
"""

import logging

from django.contrib.auth import get_user_model
from rest_framework import mixins, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import CAP_USERS_MANAGE, HasCapability
from users.serializers import UserSerializer
from users.services.exceptions import SelfDeletionError

logger = logging.getLogger(__name__)

User = get_user_model()


class UserViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_USERS_MANAGE

    pagination_results_key = "users"
    lookup_value_regex = "[0-9a-fA-F-]{32,36}"

    def get_queryset(self):
        return User.objects.all().order_by("-created_at")

    def destroy(self, request, pk=None):
        user = self.get_object()
        if user.pk == request.user.pk:
            raise SelfDeletionError()

        user_id = str(user.pk)
        user.delete()

        logger.info("User deleted", extra={"user_id": user_id, "by": str(request.user.pk)})
        return Response({"message": "User deleted"})
