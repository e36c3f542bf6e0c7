"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from delivery_pricing.app.api.v1.endpoints import delivery_charge

router = APIRouter()

# Delivery pricing
router.include_router(delivery_charge.router)
