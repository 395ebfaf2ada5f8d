from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from schoolhub.api.routes.admin import router as admin_router
from schoolhub.api.routes.attendance import router as attendance_router
from schoolhub.api.routes.configuration import router as configuration_router
from schoolhub.api.routes.school import router as school_router
from schoolhub.api.routes.students import router as students_router
from schoolhub.api.routes.users import router as users_router
from schoolhub.core.config import settings
from schoolhub.core.db import database
from schoolhub.core.tenancy.errors import TenancyError

logger = logging.getLogger(__name__)

app = FastAPI(title="SchoolHub")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(school_router, prefix="/api/v1")
app.include_router(configuration_router, prefix="/api/v1")
app.include_router(students_router, prefix="/api/v1")
app.include_router(attendance_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")


@app.exception_handler(TenancyError)
async def tenancy_error_handler(request: Request, exc: TenancyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Tenancy failure on %s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=settings.log_level.upper())


@app.on_event("shutdown")
async def shutdown_event() -> None:
    await database.dispose()


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    return {"status": "ok"}


def main() -> None:
    uvicorn.run(
        "schoolhub.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
