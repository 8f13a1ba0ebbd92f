from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from student_records.core.config import settings
from student_records.core.database import init_db
from student_records.core.handlers import register_exception_handlers
from student_records.core.logging import logger
from student_records.api.v1.router import api_router
import student_records.models.registry  # noqa: F401  (all tables on Base.metadata)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.APP_VERSION}")
    init_db()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root():
    """
    Health check endpoint
    """
    return {
        "message": "Welcome to Student Records API",
        "docs": "/docs",
        "version": settings.APP_VERSION
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("student_records.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
