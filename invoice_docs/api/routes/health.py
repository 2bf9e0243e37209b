from fastapi import APIRouter

from invoice_docs.config.settings import settings

router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok", "app": settings.APP_NAME}
