"""Base domain exceptions.

所有领域异常都应继承自 DomainException，并可以通过定义 http_status_code 和 error_code
类属性来指定 HTTP 响应细节。
"""

from fastapi import status


class DomainException(Exception):
    """Base exception for all domain errors.

    子类可以通过定义以下类属性来自定义 HTTP 响应：
    - http_status_code: HTTP 状态码（默认 400）
    - error_code: 错误代码字符串（默认 "DOMAIN_ERROR"）
    """

    http_status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "A domain error occurred"):
        self.message = message
        super().__init__(self.message)


class EntityNotFoundError(DomainException):
    """Raised when an entity is not found."""

    http_status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str | None = None):
        message = f"{entity_type} not found"
        if entity_id:
            message = f"{entity_type} with id '{entity_id}' not found"
        super().__init__(message)


class ValidationError(DomainException):
    """Raised when validation fails."""

    http_status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"


class UpstreamUnavailableError(DomainException):
    """Raised when an external service is unreachable or returns garbage.

    上游返回的畸形数据也归为此类，不向调用方传播部分解析的结果。
    """

    http_status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "UPSTREAM_UNAVAILABLE"

    def __init__(self, upstream: str, detail: str | None = None):
        self.upstream = upstream
        self.detail = detail
        message = f"{upstream} unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RateLimitExceededError(DomainException):
    """Raised when a client exceeds the request budget for the current window."""

    http_status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error_code = "RATE_LIMITED"

    def __init__(self, message: str = "Too many requests, please try again later."):
        super().__init__(message)
