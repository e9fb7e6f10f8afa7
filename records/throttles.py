from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


class LoginRateThrottle(AnonRateThrottle):
    """Per-IP limit on login attempts."""
    scope = 'login'


class BulkImportRateThrottle(UserRateThrottle):
    scope = 'bulk_import'
