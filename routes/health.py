from fastapi import APIRouter

from config import get_settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health():
    return {
        "status": "OK",
        "default_model": get_settings().default_model_name,
    }
