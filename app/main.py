import os
import logging
from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from app.routers import admin, auth, customer
from app.db.db import create_db_and_tables
from app.services.errors import InternalError, WarrantyError
from app.utils.logging import configure_logging

configure_logging(os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up...")
    try:
        create_db_and_tables()
        logger.info("DB ready.")
    except Exception:
        logger.exception("Cannot connect to DB")
    yield
    logger.info("Shutting down...")

app = FastAPI(lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WarrantyError)
async def warranty_error_handler(request: Request, exc: WarrantyError):
    if isinstance(exc, InternalError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": "Something went wrong", "errors": []})

    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "errors": exc.errors})


# Register routers
app.include_router(auth.router, prefix="/admin", tags=["Admin Auth"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(customer.router, prefix="/customer", tags=["Customer"])


@app.get("/")
def root():
    return {"status": "ok"}
