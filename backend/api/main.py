"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import results, selector
from api.sessions import discard_result, results_db, selectors_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class PrivateNetworkAccessMiddleware(BaseHTTPMiddleware):
    """Middleware to handle Private Network Access preflight requests."""

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=204)
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Access-Control-Allow-Methods"] = "*"
            response.headers["Access-Control-Allow-Headers"] = "*"
            response.headers["Access-Control-Allow-Private-Network"] = "true"
            return response

        response = await call_next(request)
        response.headers["Access-Control-Allow-Private-Network"] = "true"
        return response


# Create app
app = FastAPI(
    title="Sustainability Site Explorer",
    description="Pick a point, request a sustainability report, and browse the results",
    version="0.1.0",
)

# Private Network Access middleware (must be before CORS)
app.add_middleware(PrivateNetworkAccessMiddleware)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(selector.router, prefix="/selector", tags=["selector"])
app.include_router(results.router, prefix="/results", tags=["results"])


@app.on_event("shutdown")
def shutdown_event():
    """Close open screens so no debounce timer outlives the app."""
    for selector_id, screen in list(selectors_db.items()):
        screen.close()
        selectors_db.pop(selector_id, None)
    for result_id in list(results_db):
        discard_result(result_id)
    logger.info("Closed all open screens")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Sustainability Site Explorer"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
