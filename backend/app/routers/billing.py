"""
Billing Router
==============
POST /api/v1/billing/checkout - Start a Stripe Checkout for a premium plan.
POST /api/v1/billing/portal   - Open the Stripe customer portal.

Both return a URL the app redirects to immediately. Failures are shown to
the user as-is; nothing is retried here. Premium status itself is set on
the profile outside this API once Stripe confirms the subscription.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, HTTPException, status

from app.auth import get_authenticated_user, service_unavailable
from app.config import ConfigurationError
from app.models.billing import CheckoutRequest, CheckoutSession, PortalSession
from app.services.billing import BillingError, get_billing_gateway, price_id_for_plan

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/billing", tags=["billing"])


def _billing_failed(exc: BillingError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={
            "message": "Payment could not be processed. Please try again.",
            "code": "billing_error",
            "upstream_status": exc.status_code,
        },
    )


@router.post(
    "/checkout",
    response_model=CheckoutSession,
    summary="Create a checkout session",
    responses={
        401: {"description": "Authentication required"},
        502: {"description": "Stripe rejected the request"},
        503: {"description": "Billing is not configured"},
    },
)
async def create_checkout(
    body: CheckoutRequest,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> CheckoutSession:
    profile = get_authenticated_user(authorization)

    try:
        price_id = price_id_for_plan(body.plan)
        return await get_billing_gateway().create_checkout_session(price_id, profile.id)
    except ConfigurationError as exc:
        raise service_unavailable(exc) from exc
    except BillingError as exc:
        logger.error("Checkout failed for user %s: %s", profile.id, exc)
        raise _billing_failed(exc) from exc


@router.post(
    "/portal",
    response_model=PortalSession,
    summary="Create a customer portal session",
    responses={
        401: {"description": "Authentication required"},
        409: {"description": "Caller has no billing customer yet"},
        502: {"description": "Stripe rejected the request"},
        503: {"description": "Billing is not configured"},
    },
)
async def create_portal(
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> PortalSession:
    profile = get_authenticated_user(authorization)

    if not profile.stripe_customer_id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "No subscription to manage", "code": "no_billing_customer"},
        )

    try:
        return await get_billing_gateway().create_portal_session(profile.stripe_customer_id)
    except ConfigurationError as exc:
        raise service_unavailable(exc) from exc
    except BillingError as exc:
        logger.error("Portal session failed for user %s: %s", profile.id, exc)
        raise _billing_failed(exc) from exc
