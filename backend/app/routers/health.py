from fastapi import APIRouter

from app.core.constants import USERS_TABLE
from app.core.database import get_supabase

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "portlink-api"}


@router.get("/health/database")
async def database_health_check():
    """Database reachability check."""
    try:
        get_supabase().table(USERS_TABLE).select("id").limit(1).execute()
        return {"status": "healthy", "service": "database"}
    except Exception as e:
        return {"status": "unhealthy", "service": "database", "error": str(e)}


@router.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Welcome to Portlink API", "docs": "/docs"}
