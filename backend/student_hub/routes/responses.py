"""
Uniform response envelope shared by all API routes.

Success: {"status": "success", "message": ..., "data": ...}
Failure: {"status": "error", "message": ..., "error": ...}
"""

from fastapi.responses import JSONResponse

from student_hub.errors import status_code_for
from student_hub.logging_config import get_logger, log_with_context

logger = get_logger("http")


def success(message: str, data=None, status_code: int = 200, **extra) -> JSONResponse:
    content = {"status": "success", "message": message}
    if data is not None:
        content["data"] = data
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def failure(message: str, exc: Exception, context: dict = None) -> JSONResponse:
    """
    Build the error envelope for a failed operation.

    The status code comes from the failure's class; unexpected
    failures are logged with their traceback.
    """
    status_code = status_code_for(exc)
    if status_code >= 500:
        log_with_context(logger, "ERROR", "{}: {}".format(message, exc),
                         context=context, exc_info=True)
    else:
        log_with_context(logger, "WARNING", message, context=context,
                         extra_data={"error": str(exc), "status_code": status_code})
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message, "error": str(exc)},
    )
