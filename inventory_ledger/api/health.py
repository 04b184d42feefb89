from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the database is reachable."
)
def readiness_check(request: Request):
    """Readiness check for the database connection."""
    database_ok = request.app.state.database.ping()

    return {
        "status": "ready" if database_ok else "not_ready",
        "checks": {"database": database_ok}
    }
