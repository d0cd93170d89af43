from enum import Enum
from typing import Dict, Any
from datetime import datetime, timezone

class ErrorCode(str, Enum):
    """Standardized error codes for the application"""

    INVALID_CREDENTIALS = "AUTH_1001"
    TOKEN_INVALID = "AUTH_1003"

    VALIDATION_ERROR = "VAL_1201"
    INVALID_OBJECT_ID = "VAL_1202"
    INVALID_STAGE_INDEX = "VAL_1203"
    INVALID_TARGET = "VAL_1204"

    RESOURCE_NOT_FOUND = "RES_1301"
    RESOURCE_ALREADY_EXISTS = "RES_1302"
    RESOURCE_CONFLICT = "RES_1303"

    INTERNAL_ERROR = "SYS_1401"
    DATABASE_ERROR = "SYS_1403"

ERROR_DETAILS: Dict[ErrorCode, Dict[str, Any]] = {
    ErrorCode.INVALID_CREDENTIALS: {
        "message": "Invalid authentication credentials",
        "http_status": 401,
    },
    ErrorCode.TOKEN_INVALID: {
        "message": "Invalid or expired token",
        "http_status": 401,
    },
    ErrorCode.VALIDATION_ERROR: {
        "message": "Request validation failed",
        "http_status": 400,
    },
    ErrorCode.INVALID_OBJECT_ID: {
        "message": "Malformed identifier",
        "http_status": 400,
    },
    ErrorCode.INVALID_STAGE_INDEX: {
        "message": "Stage index is out of range",
        "http_status": 400,
    },
    ErrorCode.INVALID_TARGET: {
        "message": "Exactly one of role_id or drive_id is required",
        "http_status": 400,
    },
    ErrorCode.RESOURCE_NOT_FOUND: {
        "message": "Resource not found",
        "http_status": 404,
    },
    ErrorCode.RESOURCE_ALREADY_EXISTS: {
        "message": "Resource already exists",
        "http_status": 409,
    },
    ErrorCode.RESOURCE_CONFLICT: {
        "message": "Resource state conflicts with the request",
        "http_status": 409,
    },
    ErrorCode.INTERNAL_ERROR: {
        "message": "Internal server error",
        "http_status": 500,
    },
    ErrorCode.DATABASE_ERROR: {
        "message": "Server error",
        "http_status": 500,
    },
}

def get_http_status(error_code: ErrorCode) -> int:
    return ERROR_DETAILS.get(error_code, {}).get("http_status", 500)

def get_error_response(error_code: ErrorCode, details: str = None) -> Dict[str, Any]:
    """Get standardized error response"""
    error_info = ERROR_DETAILS.get(error_code, {
        "message": "An error occurred",
        "http_status": 500,
    })

    return {
        "error": {
            "code": error_code.value,
            "message": error_info["message"],
            "details": details,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    }
