from fastapi import APIRouter

from app.config import settings
from app.schemas.catalog_schemas import PublicSettings


router = APIRouter()


@router.get("/public", response_model=PublicSettings)
def get_public_settings():
    # presentation settings come from config, not from the client
    return {"store_name": settings.STORE_NAME, "tagline": settings.STORE_TAGLINE}
