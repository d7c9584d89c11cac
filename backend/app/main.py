# backend/app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import budgets, categories, reports, transactions
from backend.app.config import settings
from backend.app.db import init_db
from backend.app.errors import register_error_handlers
from backend.app.logging import configure_json_logging
from backend.app.middleware.request_logging import RequestLogMiddleware

configure_json_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("finance tracker started (env=%s)", settings.APP_ENV)
    yield


app = FastAPI(title="Personal Finance Tracker", lifespan=lifespan)

app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_credentials="*" not in settings.allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)

app.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
app.include_router(budgets.router, prefix="/budgets", tags=["budgets"])
app.include_router(categories.router, prefix="/categories", tags=["categories"])
app.include_router(reports.router, prefix="/reports", tags=["reports"])


@app.get("/")
def root():
    return {"message": "Personal Finance Tracker API is running"}
