from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import auth, employees, pos, products, reports, sales, settings as settings_api
from app.core.config import settings
from app.core.logging import configure_logging

API_PREFIX = "/api/v1"

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description="Point of sale and inventory for a single business",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
for module in (auth, pos, products, sales, reports, employees, settings_api):
    app.include_router(module.router, prefix=API_PREFIX)


@app.get("/health")
async def health_check():
    return {"status": "ok", "version": "0.1.0"}
