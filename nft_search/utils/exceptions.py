"""
Exception hierarchy for nft-search

Codec failures (TypeMismatch, TruncatedData, InvalidEncoding) share the
AbiError base; RpcError carries the collaborator's message. Every error has a
numeric code and a details dict so callers can log or serialize it.
"""
from typing import Any, Dict, Optional


class ErrorCodes:
    """Numeric error codes grouped by layer"""
    # ABI codec (1xxx)
    TYPE_MISMATCH = 1001
    TRUNCATED_DATA = 1002
    INVALID_ENCODING = 1003

    # RPC collaborator (2xxx)
    RPC_ERROR = 2001

    # Configuration (3xxx)
    CONFIG_INVALID = 3001
    CONFIG_NOT_FOUND = 3002


class NftSearchError(Exception):
    """Base exception class for nft-search"""

    def __init__(self, message: str, code: int = None, details: Dict[str, Any] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.code is not None:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


class AbiError(NftSearchError):
    """ABI encode/decode error"""
    pass


class TypeMismatch(AbiError):
    """A value's runtime shape disagrees with its declared type"""

    def __init__(self, message: str, expected: str = None, actual: str = None):
        details = {}
        if expected is not None:
            details["expected"] = expected
        if actual is not None:
            details["actual"] = actual
        super().__init__(message, code=ErrorCodes.TYPE_MISMATCH, details=details)


class TruncatedData(AbiError):
    """Buffer is shorter than a field requires"""

    def __init__(self, message: str, offset: int = None, needed: int = None,
                 available: int = None):
        details = {}
        if offset is not None:
            details["offset"] = offset
        if needed is not None:
            details["needed"] = needed
        if available is not None:
            details["available"] = available
        super().__init__(message, code=ErrorCodes.TRUNCATED_DATA, details=details)


class InvalidEncoding(AbiError):
    """Bytes cannot represent the declared type"""

    def __init__(self, message: str, abi_type: str = None, offset: int = None):
        details = {}
        if abi_type is not None:
            details["abi_type"] = abi_type
        if offset is not None:
            details["offset"] = offset
        super().__init__(message, code=ErrorCodes.INVALID_ENCODING, details=details)


class RpcError(NftSearchError):
    """RPC call error"""

    def __init__(self, message: str, rpc_code: Optional[int] = None, method: str = None):
        self.rpc_code = rpc_code
        details = {}
        if rpc_code is not None:
            details["rpc_code"] = rpc_code
        if method is not None:
            details["method"] = method
        super().__init__(message, code=ErrorCodes.RPC_ERROR, details=details)


class ConfigurationError(NftSearchError):
    """Configuration error"""

    def __init__(self, message: str, config_file: str = None, field: str = None,
                 code: int = ErrorCodes.CONFIG_INVALID):
        details = {}
        if config_file is not None:
            details["config_file"] = config_file
        if field is not None:
            details["field"] = field
        super().__init__(message, code=code, details=details)
