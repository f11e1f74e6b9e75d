import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import aeo as aeo_api
from config import config

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="AEO Readiness API",
    description="Audits websites for AI answer engine readiness and tracks market interest for topic keywords.",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(aeo_api.router, prefix="/api")


@app.get("/", tags=["Root"])
def read_root():
    """
    Root endpoint to check if the API is running.
    """
    return {"status": "ok", "message": "Welcome to the AEO Readiness API"}


@app.get("/health")
def health_check():
    """
    Health check endpoint for deployment monitoring
    """
    return {"status": "healthy", "service": "aeo-readiness-api"}


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8080))
    logger.info(f"Starting AEO Readiness API on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
