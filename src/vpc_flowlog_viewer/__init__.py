"""
VPC Flow Log Viewer package.

Reads AWS VPC Flow Logs from CloudWatch Logs and prints each record
in an easy to read, one-line-per-flow format.
"""

from typing import Final

# Package metadata
__version__: Final[str] = "1.0.0"
__description__: Final[str] = "AWS VPC Flow Log viewer for CloudWatch Logs"

# Public API exports
from .aws_utils import (
    AWSOperationError,
    FlowLogSubscription,
    FlowLogSubscriptionFinder,
    LogEventPaginator,
    LogStreamLister,
    NetworkLister,
)
from .config import FLOW_LOG_FIELDS, PROTOCOL_NAMES, ViewerConfig
from .formatter import RecordFormatter, format_record
from .parser import (
    FlowRecord,
    LogLineParser,
    MalformedRecordError,
    RawLogLine,
    parse_log_line,
)
from .protocol_utils import get_protocol_name
from .time_utils import format_event_time, resolve_timezone
from .viewer import (
    FlowLogResolver,
    FlowLogViewer,
    ViewResult,
    ViewStatus,
    create_viewer,
    view_vpc_flow_logs,
)

__all__ = [
    # AWS utilities
    "AWSOperationError",
    "FlowLogSubscription",
    "FlowLogSubscriptionFinder",
    "LogEventPaginator",
    "LogStreamLister",
    "NetworkLister",
    # Configuration
    "FLOW_LOG_FIELDS",
    "PROTOCOL_NAMES",
    "ViewerConfig",
    # Formatting
    "RecordFormatter",
    "format_record",
    # Parser
    "FlowRecord",
    "LogLineParser",
    "MalformedRecordError",
    "RawLogLine",
    "parse_log_line",
    "get_protocol_name",
    # Time utilities
    "format_event_time",
    "resolve_timezone",
    # Viewer
    "FlowLogResolver",
    "FlowLogViewer",
    "ViewResult",
    "ViewStatus",
    "create_viewer",
    "view_vpc_flow_logs",
]
