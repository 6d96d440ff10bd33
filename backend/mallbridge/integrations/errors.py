"""""
   平台集成层专用异常类型。
   将 HTTP/限流/服务端/载荷等错误与业务层解耦，便于上层统一处理。
   注意：链接解析、缓存失败不走这里，它们永远不抛异常。
"""

class MallBridgeError(Exception):
    """Base for all mallbridge errors."""

class FetcherNotConfiguredError(MallBridgeError):
    """No fetch collaborator is configured for the requested platform."""

class UpstreamError(MallBridgeError):
    """Base for failures of the platform fetch collaborators."""

class UpstreamClientError(UpstreamError):
    """Network/client-side errors after retries, or a non-retryable 4xx."""

class UpstreamServerError(UpstreamError):
    """Server-side (5xx) errors after retries."""

class UpstreamRateLimitError(UpstreamError):
    """429 Too Many Requests not resolved after retries."""

class UpstreamPayloadError(UpstreamError):
    """Unexpected/invalid response payload shape or content."""
