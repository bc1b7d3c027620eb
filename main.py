from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from pathlib import Path
import logging

from storage import get_settings
from api import counter, data, push

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: make sure the room documents have somewhere to live
    settings = get_settings()
    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
    logger.info(f"Room documents stored in {Path(settings.data_dir).resolve()}")
    yield


app = FastAPI(
    title="Snack Counter API",
    description="Multi-room counter with rate-limited increments and a bounded activity log",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(counter.router)
app.include_router(data.router)
app.include_router(push.router)


@app.get("/")
def root():
    return {"message": "Snack Counter API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
