from fastapi import APIRouter

from app.api.routers import bookings, events, members, services, tiers, yachts

api_router = APIRouter()

api_router.include_router(tiers.router)
api_router.include_router(members.router)
api_router.include_router(yachts.router)
api_router.include_router(services.router)
api_router.include_router(events.router)
api_router.include_router(bookings.router)
