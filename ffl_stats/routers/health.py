"""Health check router."""

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Health check per load balancer e monitoring."""
    return {"status": "healthy"}
