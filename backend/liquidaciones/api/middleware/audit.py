"""
Middleware de auditoría.
Registra cada petición con su estado y tiempo de respuesta.
"""
import logging
import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("liquidaciones.audit")


class AuditLogMiddleware(BaseHTTPMiddleware):
    """
    Registra todas las peticiones para auditoría.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            f"[AUDIT] {request.method} {request.url.path} "
            f"- {response.status_code} - {process_time:.3f}s "
            f"- IP: {client_ip}"
        )
        response.headers["X-Process-Time"] = f"{process_time:.3f}"

        return response
