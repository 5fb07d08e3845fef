import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from database import init_db
from api.applications import router as applications_router
from api.applications import status_router as application_status_router
from api.notifications import router as notifications_router
from utils.errors import error_response, format_validation_errors, log_error

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(
    title=settings.app_name,
    description="Investor application intake and admin notification API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        name = ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        errors.setdefault(name, []).append(err.get("msg", "invalid"))
    return JSONResponse(status_code=400, content=format_validation_errors(errors))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    log_error(exc, f"{request.method} {request.url.path}")
    return error_response(exc, status_code=500)


app.include_router(applications_router)
app.include_router(application_status_router)
app.include_router(notifications_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
