from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from proscons.api_routes import router as api_router
from proscons.core.errors import AnalysisError, BadRequest, MethodNotAllowed
from proscons.core.log_config import configure_logging
from proscons.core.settings import get_settings
from proscons.middleware.request_logging import RequestLoggingMiddleware

PROJECT_ROOT = Path(__file__).resolve().parents[1]

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Pros & Cons Analyzer")

app.mount("/static", StaticFiles(directory=PROJECT_ROOT / "static"), name="static")
templates = Jinja2Templates(directory=PROJECT_ROOT / "templates")

app.add_middleware(RequestLoggingMiddleware)
app.include_router(api_router)


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (details=%s)", request.method, request.url.path, exc, exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # the only request body in the API is {topic}; anything unreadable is a missing topic
    logger.warning("Rejected body on %s: %s", request.url.path, exc.errors())
    return await analysis_error_handler(request, BadRequest())


@app.exception_handler(StarletteHTTPException)
async def starlette_http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        response = await analysis_error_handler(request, MethodNotAllowed())
        response.headers.update(exc.headers or {})
        return response
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Internal Server Error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


@app.get("/", response_class=HTMLResponse)
def home(request: Request):
    settings = get_settings()
    return templates.TemplateResponse(request, "index.html", {"title": settings.app_title})


@app.get("/health")
def health():
    return {"status": "ok"}
