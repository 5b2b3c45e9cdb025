from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    settings = request.app.state.settings
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "database": settings.MONGODB_DATABASE,
        "collection": settings.MONGODB_COLLECTION,
    }
