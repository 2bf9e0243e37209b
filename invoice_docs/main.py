from fastapi import FastAPI

from invoice_docs.api.routes import api_router
from invoice_docs.config.settings import settings
from invoice_docs.core.logging_config import setup_logging

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)


@app.on_event("startup")
async def startup():
    setup_logging()


app.include_router(api_router)
