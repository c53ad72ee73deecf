import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from coursehub.core.config import settings
from coursehub.core.errors import LmsError
from coursehub.core.logging_middleware import LoggingMiddleware
from coursehub.db.init_db import init_db
from coursehub.routers.assignments import router as assignments_router
from coursehub.routers.submissions import router as submissions_router

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title=settings.PROJECT_NAME)

# Middleware
app.add_middleware(LoggingMiddleware)


# Every failure goes out as {"error": "..."}
@app.exception_handler(LmsError)
def lms_error_handler(request: Request, exc: LmsError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "form"))
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=422,
        content={"error": f"{field}: {message}" if field else message},
    )


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(assignments_router, tags=["assignments"])
app.include_router(submissions_router, tags=["submissions"])
