import logging
import time

from fastapi import Request

logger = logging.getLogger("reservas_backend")


async def log_requests(request: Request, call_next):
    # Los recursos estáticos del PWA no se registran
    if request.url.path.startswith("/static"):
        return await call_next(request)

    started = time.perf_counter()
    logger.info("Petición: %s %s", request.method, request.url.path)
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("Respuesta: %s %s (%.1f ms)", response.status_code, request.url.path, elapsed_ms)
    return response
