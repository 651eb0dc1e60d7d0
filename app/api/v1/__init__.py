from fastapi import APIRouter

from app.api.v1 import payouts, profile, proxy, webhooks

api_router = APIRouter()

api_router.include_router(proxy.router, prefix="/proxy", tags=["proxy"])
api_router.include_router(payouts.router, prefix="/payouts", tags=["payouts"])
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
