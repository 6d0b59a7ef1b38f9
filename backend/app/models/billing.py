"""
Billing Schemas
===============
Checkout and customer-portal payloads for the premium subscription.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

Plan = Literal["monthly", "annual"]


class CheckoutRequest(BaseModel):
    plan: Plan


class CheckoutSession(BaseModel):
    """Returned by the gateway; the app redirects to ``url`` immediately."""

    session_id: str
    url: Optional[str] = None


class PortalSession(BaseModel):
    url: str

