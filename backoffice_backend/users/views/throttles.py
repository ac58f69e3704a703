# users/views/throttles.py

from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


class AuthAnonThrottle(AnonRateThrottle):
    """
    Anonymous throttling for register / login / password reset.
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['anon'].
    """
    scope = "anon"


class MeUserThrottle(UserRateThrottle):
    """
    Authenticated user throttling for /me.
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['user'].
    """
    scope = "user"
