"""Scoped throttling shared by the storefront apps.

Overrides DRF's ScopedRateThrottle rate lookup to read from Django settings
at request-time, so tests using override_settings reliably affect rates.
"""

from django.conf import settings
from rest_framework.throttling import ScopedRateThrottle


class SettingsScopedRateThrottle(ScopedRateThrottle):
    def get_rate(self):
        rf = getattr(settings, "REST_FRAMEWORK", {})
        rates = rf.get("DEFAULT_THROTTLE_RATES", {})
        return rates.get(self.scope)

    def get_ident(self, request):
        # Guest carts and checkouts are identified by X-Session-Id; prefer it over the client IP.
        session_id = request.headers.get("X-Session-Id")
        if session_id:
            return f"session:{session_id}"
        return super().get_ident(request)
