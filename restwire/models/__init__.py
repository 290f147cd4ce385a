from restwire.models.common import FailureKind, Retryability
from restwire.models.error_body import ErrorResponseBody, LenientErrorResponseBody

__all__ = [
    "FailureKind",
    "Retryability",
    "ErrorResponseBody",
    "LenientErrorResponseBody",
]
