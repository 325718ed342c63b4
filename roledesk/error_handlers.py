from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler, request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .app_context import templates

logger = logging.getLogger("roledesk.errors")


def _is_html_page_request(request: Request) -> bool:
    accept = (request.headers.get("accept") or "").lower()
    return "text/html" in accept


def _error_title(status_code: int) -> str:
    if status_code == 401:
        return "Authentication required"
    if status_code == 403:
        return "Access denied"
    if status_code == 404:
        return "Page not found"
    if status_code == 405:
        return "Method not allowed"
    if status_code == 422:
        return "Invalid input"
    if status_code >= 500:
        return "Server error"
    return "Request failed"


def _error_reason(status_code: int) -> str:
    if status_code == 401:
        return "Please log in to continue."
    if status_code == 403:
        return "Your account is not allowed to open this page."
    if status_code == 404:
        return "The page you are looking for does not exist."
    if status_code == 405:
        return "This page does not accept that request method."
    if status_code == 422:
        return "The submitted form data is invalid."
    if status_code >= 500:
        return "Something went wrong on our side."
    return "The request could not be completed."


def _detail_from_exc(exc: Any, fallback: str) -> str:
    raw = getattr(exc, "detail", None)
    if isinstance(raw, str) and raw.strip():
        return raw
    if raw is not None:
        return str(raw)
    return fallback


def _render_error_page(request: Request, status_code: int, detail: str):
    template = "auth/401.html" if status_code == 401 else "common/error.html"
    return templates.TemplateResponse(
        request,
        template,
        {
            "status_code": status_code,
            "path": request.url.path,
            "detail": detail,
            "error_title": _error_title(status_code),
            "error_reason": _error_reason(status_code),
        },
        status_code=status_code,
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        if _is_html_page_request(request):
            return _render_error_page(request, 422, _error_reason(422))
        return await request_validation_exception_handler(request, exc)

    @app.exception_handler(HTTPException)
    async def fastapi_http_exception_handler(request: Request, exc: HTTPException):
        if _is_html_page_request(request):
            detail = _detail_from_exc(exc, _error_reason(exc.status_code))
            return _render_error_page(request, exc.status_code, detail)
        return await http_exception_handler(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
        if _is_html_page_request(request):
            detail = _detail_from_exc(exc, _error_reason(exc.status_code))
            return _render_error_page(request, exc.status_code, detail)
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        if _is_html_page_request(request):
            return _render_error_page(request, 500, _error_reason(500))
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
