"""
Parser module for VPC Flow Log Viewer.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .config import FlowLogSchema
from .protocol_utils import get_protocol_name


class MalformedRecordError(ValueError):
    """Raised when a log line has fewer fields than the flow log schema."""

    def __init__(self, line: str, field_count: int):
        self.line = line
        self.field_count = field_count
        super().__init__(
            f"Malformed flow log record: expected at least {FlowLogSchema.MIN_FIELDS} "
            f"fields, got {field_count}: {line!r}"
        )


@dataclass(frozen=True)
class RawLogLine:
    """A single CloudWatch Logs event: message text plus epoch-ms timestamp."""

    message: str
    timestamp: int

    @classmethod
    def from_event(cls, event: dict[str, Any]) -> "RawLogLine":
        """Build from a GetLogEvents event dictionary."""
        return cls(message=event["message"], timestamp=int(event["timestamp"]))


@dataclass(frozen=True)
class FlowRecord:
    """One decoded network-traffic observation."""

    version: str
    account_id: str
    interface_id: str
    source_ip: str
    dest_ip: str
    source_port: str
    dest_port: str
    protocol_number: str
    packets: str
    byte_count: str
    start: str
    end: str
    action: str
    log_status: str
    event_timestamp: int

    @property
    def protocol(self) -> str:
        return get_protocol_name(self.protocol_number)

    @property
    def is_accepted_ok(self) -> bool:
        return (
            self.action == FlowLogSchema.ACCEPT and self.log_status == FlowLogSchema.OK
        )


class LogLineParser:
    """Handles parsing of individual VPC Flow Log lines."""

    def __init__(self, fields: tuple[str, ...] = FlowLogSchema.FIELDS):
        self.fields = fields

    def parse_line(self, raw: RawLogLine) -> Optional[FlowRecord]:
        """
        Parse a raw log line into a FlowRecord.

        Returns None for NODATA records, which carry no address data and
        must not be shown. Raises MalformedRecordError when the line is
        shorter than the schema.
        """
        parts = raw.message.split()
        if self._status(parts) == FlowLogSchema.NODATA:
            return None

        if len(parts) < len(self.fields):
            raise MalformedRecordError(raw.message, len(parts))

        values = dict(zip(self.fields, parts))
        return FlowRecord(**values, event_timestamp=raw.timestamp)

    def _status(self, parts: list[str]) -> Optional[str]:
        """Log status field; a line missing only its action ends with the status."""
        if len(parts) >= len(self.fields):
            return parts[len(self.fields) - 1]
        if len(parts) == len(self.fields) - 1:
            return parts[-1]
        return None


# Public API functions - maintain backward compatibility
def parse_log_line(message: str, timestamp: int) -> Optional[FlowRecord]:
    """Parse a VPC Flow Log line into a FlowRecord (None when suppressed)."""
    parser = LogLineParser()
    return parser.parse_line(RawLogLine(message=message, timestamp=timestamp))
