import logging

from fastapi.responses import JSONResponse

from core.errors import ErrorCode, http_status_for

logger = logging.getLogger(__name__)


def error_response(result: dict, action: str) -> JSONResponse:
    code = ErrorCode(result["code"])
    logger.error("%s failed (%s): %s", action, code.value, result["error"])
    return JSONResponse(
        status_code=http_status_for(result),
        content={"success": False, "error": result["error"], "code": code.value},
    )
