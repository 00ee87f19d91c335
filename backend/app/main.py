import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.routers.documents import router as documents_router
from app.routers.forms import router as forms_router
from app.routers.submissions import router as submissions_router
from app.routers.templates import router as templates_router
from app.styles import STYLES

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="FormForge Backend (FastAPI + Mongo)")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(forms_router)
app.include_router(submissions_router)
app.include_router(documents_router)
app.include_router(templates_router)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/styles")
async def list_styles():
    return {"styles": sorted(STYLES), "default": settings.DEFAULT_STYLE}
