from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.responses import JSONResponse
from fastapi import Request
from shared.core.schemas import JsonOutResult
from shared.utils.logger import get_logger
from typing import Callable, Any
import json

logger = get_logger(__name__)

LIST_KEYS = {"items", "children", "results", "errors", "materials",
             "activities", "routes", "comments", "history", "valid_transitions"}


def replace_nulls_with_empty(value: Any):
    """
    Recursively replaces None based on expected structure:
    - List fields -> []
    - Primitives -> ""
    """
    if isinstance(value, dict):
        cleaned = {}
        for k, v in value.items():
            if v is None and k.lower() in LIST_KEYS:
                cleaned[k] = []
            else:
                cleaned[k] = replace_nulls_with_empty(v)
        return cleaned

    elif isinstance(value, list):
        return [replace_nulls_with_empty(v) for v in value]

    elif value is None:
        return ""

    return value


def _passthrough_headers(response):
    return {k: v for k, v in response.headers.items() if k.lower() != "content-length"}


class JsonResponseMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        # Skip docs/openapi endpoints
        if request.url.path.startswith(("/openapi", "/docs", "/redoc")):
            return await call_next(request)

        response = await call_next(request)

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            return response

        body_bytes = b""
        async for chunk in response.body_iterator:
            body_bytes += chunk

        try:
            data = json.loads(body_bytes.decode("utf-8")) if body_bytes else None
        except ValueError:
            logger.warning("Response body for %s is not valid JSON", request.url.path)
            data = None

        already_wrapped = isinstance(data, dict) and {
            "status", "status_code", "message"}.issubset(data.keys())

        # Error responses (4xx/5xx)
        if not (200 <= response.status_code < 400):
            if already_wrapped:
                wrapped_error = {**data, "status": "Failed"}
            else:
                message = ""
                if isinstance(data, dict):
                    message = data.get("detail") or data.get("message") or ""
                elif isinstance(data, str):
                    message = data
                else:
                    message = "An unexpected error occurred"

                wrapped_error = JsonOutResult(
                    data=None,
                    status="Failed",
                    status_code=str(response.status_code),
                    message=str(message),
                ).model_dump(exclude_none=False)

            return JSONResponse(
                content=replace_nulls_with_empty(wrapped_error),
                status_code=response.status_code,
                headers=_passthrough_headers(response),
            )

        # Skip wrapping if already wrapped
        if already_wrapped:
            return JSONResponse(
                content=replace_nulls_with_empty(data),
                status_code=response.status_code,
                headers=_passthrough_headers(response),
            )

        wrapped = {
            "data": data if data not in [None, {}] else "",
            "status": "Success",
            "status_code": str(response.status_code),
            "message": "Data retrieved successfully",
        }

        return JSONResponse(
            content=replace_nulls_with_empty(wrapped),
            status_code=response.status_code,
            headers=_passthrough_headers(response),
        )
