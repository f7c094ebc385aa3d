from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .routers import budget

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("budget_backend")

app = FastAPI(
    title=settings.APP_NAME,
    description="Construction budget totals and bilingual budget summary documents",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(budget.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "budget-backend"}
