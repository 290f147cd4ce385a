from restwire.core.exceptions import HttpError, NetworkError, ServiceError
from restwire.execution.error_handler import ErrorClassifier

__all__ = ["ErrorClassifier", "HttpError", "NetworkError", "ServiceError"]
