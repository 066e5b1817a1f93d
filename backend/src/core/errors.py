from enum import Enum


class ErrorCode(str, Enum):
    NOT_FOUND = "NotFound"
    DUPLICATE_ITEM = "DuplicateItem"
    DUPLICATE_FOLDER = "DuplicateFolder"
    RESERVED_NAME = "ReservedName"
    OWNER_REQUIRED = "OwnerRequired"
    OWNER_NOT_FOUND = "OwnerNotFound"
    NOT_SHARED_OR_MISSING = "NotSharedOrMissing"
    VALIDATION_FAILED = "ValidationFailed"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"


HTTP_STATUS = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.DUPLICATE_ITEM: 409,
    ErrorCode.DUPLICATE_FOLDER: 409,
    ErrorCode.RESERVED_NAME: 400,
    ErrorCode.OWNER_REQUIRED: 400,
    ErrorCode.OWNER_NOT_FOUND: 404,
    ErrorCode.NOT_SHARED_OR_MISSING: 404,
    ErrorCode.VALIDATION_FAILED: 400,
    ErrorCode.SERVICE_UNAVAILABLE: 503,
}


def failure(code: ErrorCode, message: str) -> dict:
    return {"error": message, "code": code}


def http_status_for(result: dict) -> int:
    return HTTP_STATUS.get(result.get("code"), 400)
