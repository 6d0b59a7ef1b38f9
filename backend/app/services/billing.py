"""
Billing Gateway
===============
Creates Stripe Checkout and Billing Portal sessions for the premium
subscription through the Stripe REST API.

- create_checkout_session(): subscription checkout for one price; the app
  redirects to the returned URL straight away, so this call is awaited.
- create_portal_session(): customer portal for managing an existing
  subscription.

Both are single attempts. Errors go back to the caller, who shows them to
the user; nothing here retries.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional, Protocol

import httpx

from app.config import ConfigurationError, Settings, get_settings
from app.models.billing import CheckoutSession, Plan, PortalSession

logger = logging.getLogger(__name__)

STRIPE_BASE_URL = "https://api.stripe.com"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class BillingError(Exception):
    """Stripe rejected the request, or could not be reached (status_code 0)."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Stripe API error {status_code}: {body}")


class BillingGateway(Protocol):
    async def create_checkout_session(self, price_id: str, user_id: str) -> CheckoutSession: ...

    async def create_portal_session(self, customer_id: str) -> PortalSession: ...


# ---------------------------------------------------------------------------
# StripeBillingGateway
# ---------------------------------------------------------------------------


class StripeBillingGateway:
    """Form-encoded POSTs to the Stripe v1 API with the secret key."""

    def __init__(self, settings: Settings) -> None:
        self._secret_key = settings.stripe_secret_key
        self._api_version = settings.stripe_api_version
        self._app_url = settings.app_url

    async def create_checkout_session(self, price_id: str, user_id: str) -> CheckoutSession:
        """POST /v1/checkout/sessions for a monthly or annual subscription."""
        data = await self._post(
            "/v1/checkout/sessions",
            {
                "mode": "subscription",
                "payment_method_types[0]": "card",
                "line_items[0][price]": price_id,
                "line_items[0][quantity]": "1",
                "success_url": f"{self._app_url}?success=true",
                "cancel_url": f"{self._app_url}?canceled=true",
                "metadata[userId]": user_id,
            },
        )
        logger.info("Created checkout session %s for user %s", data["id"], user_id)
        return CheckoutSession(session_id=data["id"], url=data.get("url"))

    async def create_portal_session(self, customer_id: str) -> PortalSession:
        """POST /v1/billing_portal/sessions returning to the app afterwards."""
        data = await self._post(
            "/v1/billing_portal/sessions",
            {"customer": customer_id, "return_url": self._app_url},
        )
        return PortalSession(url=data["url"])

    async def _post(self, path: str, form: dict[str, str]) -> dict:
        """Shared POST with bearer auth.

        Raises BillingError on non-2xx, and with status 0 when Stripe
        could not be reached at all.
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{STRIPE_BASE_URL}{path}",
                    data=form,
                    headers={
                        "Authorization": f"Bearer {self._secret_key}",
                        "Stripe-Version": self._api_version,
                    },
                )
        except httpx.HTTPError as exc:
            logger.warning("Stripe request to %s failed: %s", path, exc)
            raise BillingError(0, str(exc)) from exc

        if not response.is_success:
            raise BillingError(response.status_code, response.text)
        return response.json()


# ---------------------------------------------------------------------------
# DisabledBillingGateway
# ---------------------------------------------------------------------------


class DisabledBillingGateway:
    """Used when STRIPE_SECRET_KEY is unset. Every call fails immediately."""

    _MESSAGE = (
        "STRIPE_SECRET_KEY is not configured. Set it in the environment "
        "to enable payments."
    )

    async def create_checkout_session(self, price_id: str, user_id: str) -> CheckoutSession:
        raise ConfigurationError(self._MESSAGE)

    async def create_portal_session(self, customer_id: str) -> PortalSession:
        raise ConfigurationError(self._MESSAGE)


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------


def price_id_for_plan(plan: Plan, settings: Optional[Settings] = None) -> str:
    """Map a plan name to its configured Stripe price id."""
    settings = settings or get_settings()
    price_id = {
        "monthly": settings.stripe_monthly_price_id,
        "annual": settings.stripe_annual_price_id,
    }[plan]
    if not price_id:
        raise ConfigurationError(f"No Stripe price id configured for the {plan} plan.")
    return price_id


@lru_cache
def get_billing_gateway() -> BillingGateway:
    settings = get_settings()
    if not settings.stripe_configured:
        logger.warning("Stripe not configured: billing is disabled")
        return DisabledBillingGateway()
    return StripeBillingGateway(settings)
