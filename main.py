import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wippf_app.core.config import get_settings
from wippf_app.core.logging_config import setup_logging
from wippf_app.routers import assessment as assessment_router

settings = get_settings()

# Configure logging before anything else logs
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="WIPPF Profile Engine - API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(assessment_router.router, prefix=settings.api_prefix, tags=["assessment"])


@app.get("/health", tags=["Health Check"])
async def health_check():
    """
    Basic health check.
    """
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    # Better to run with `uvicorn main:app --reload` from the project root directory
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
