"""Nine-box rating engine FastAPI application."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ninebox import __version__
from ninebox.api.admin import router as admin_router
from ninebox.api.assessments import router as assessments_router
from ninebox.api.health import router as health_router
from ninebox.config import settings
from ninebox.errors import ConsistencyViolation, NoDataError, NotFoundError, ValidationError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Nine-Box Talent Rating Engine",
    description="Scores performance and potential from talent data and keeps an evidence trail",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.message, "axis": exc.axis},
    )


@app.exception_handler(NoDataError)
async def no_data_handler(request: Request, exc: NoDataError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "axis": exc.axis, "insufficient_data": True},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(ConsistencyViolation)
async def consistency_violation_handler(request: Request, exc: ConsistencyViolation):
    logger.error("Consistency violation on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "The assessment could not be saved. No changes were made."},
    )


app.include_router(health_router, tags=["Health"])
app.include_router(assessments_router, prefix="/v1", tags=["Assessments"])
app.include_router(admin_router, prefix="/v1/admin", tags=["Admin"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"service": "ninebox", "version": __version__, "docs": "/docs"}
