from fastapi import APIRouter

from app.config import get_config

router = APIRouter()


@router.get("/registry")
def registry() -> dict[str, str]:
    config = get_config().registry
    return {
        "registry_url": config.base_url,
        "authorization_scheme": config.authorization_scheme,
    }
