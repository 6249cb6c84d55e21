"""API v1 router configuration."""

from fastapi import APIRouter

from outpatient.api.v1.endpoints import doctors, health, patients, queue, vitals

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(queue.router, prefix="/queue", tags=["Queue"])
api_router.include_router(vitals.router, prefix="/vitals", tags=["Vitals"])
api_router.include_router(patients.router, prefix="/patients", tags=["Patients"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["Doctors"])
