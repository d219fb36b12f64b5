"""API router configuration."""

from fastapi import APIRouter

from app.api.endpoints import (
    auth,
    bills,
    donations,
    family,
    health,
    inventory,
    medical_documents,
    medications,
    pharmacies,
    reminders,
    users,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router)
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router)
api_router.include_router(pharmacies.router)
api_router.include_router(inventory.router)
api_router.include_router(bills.router)
api_router.include_router(medications.router)
api_router.include_router(reminders.router)
api_router.include_router(family.router)
api_router.include_router(donations.router)
api_router.include_router(medical_documents.router)
