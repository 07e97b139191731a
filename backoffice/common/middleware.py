"""
HTTP middleware shared by every router
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import logging

from backoffice.core.config import settings

logger = logging.getLogger(__name__)

# Room for multipart boundaries and part headers around the file itself
MULTIPART_OVERHEAD = 64 * 1024


class UploadSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Rejects uploads whose declared Content-Length exceeds MAX_UPLOAD_SIZE
    before the body is read. The router still checks the received file size,
    since chunked requests carry no Content-Length.
    """

    def __init__(self, app, max_upload_size: int = None):
        super().__init__(app)
        self.max_upload_size = max_upload_size or settings.MAX_UPLOAD_SIZE

    async def dispatch(self, request: Request, call_next):
        if request.method not in ("POST", "PUT", "PATCH"):
            return await call_next(request)

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > self.max_upload_size + MULTIPART_OVERHEAD:
                logger.warning(
                    f"Request to {request.url.path} rejected: Content-Length {content_length} "
                    f"exceeds {self.max_upload_size} bytes"
                )
                max_mb = self.max_upload_size // (1024 * 1024)
                return JSONResponse(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    content={"detail": f"El archivo excede el tamaño máximo permitido de {max_mb}MB"}
                )

        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers for production
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response
