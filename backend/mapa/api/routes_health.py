from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Liveness only; does not touch the database or the model."""
    return {"status": "ok"}
