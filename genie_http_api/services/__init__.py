from .response_sink import CORS_HEADERS, ResponseSink
from .correlation_store import CorrelationStore, PendingRecord
from .timeout_supervisor import TimeoutSupervisor
from .reply_completer import ReplyCompleter
from .admitter import RequestAdmitter, Router
from .echo_router import EchoRouter

__all__ = [
    "CORS_HEADERS",
    "ResponseSink",
    "CorrelationStore",
    "PendingRecord",
    "TimeoutSupervisor",
    "ReplyCompleter",
    "RequestAdmitter",
    "Router",
    "EchoRouter",
]
