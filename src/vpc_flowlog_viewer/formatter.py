"""
Output formatting for VPC Flow Log Viewer.
"""

from datetime import tzinfo
from typing import Optional

from .parser import FlowRecord
from .time_utils import format_event_time

ANOMALY_MARKER = "  <-"


class RecordFormatter:
    """Renders FlowRecords as one human-readable line each."""

    def __init__(self, tz: Optional[tzinfo] = None):
        # None renders in the local zone of the running process
        self.tz = tz

    def format_record(self, rec: FlowRecord) -> str:
        """Format the traffic portion of a record, including the marker."""
        line = (
            f"{rec.interface_id} : {rec.source_ip}[{rec.source_port}] --> "
            f"{rec.dest_ip}[{rec.dest_port}] : {rec.protocol} : "
            f"{rec.action} {rec.log_status}"
        )
        if not rec.is_accepted_ok:
            line += ANOMALY_MARKER
        return line

    def format_line(self, rec: FlowRecord) -> str:
        """Format a full output line with its leading event time."""
        event_time = format_event_time(rec.event_timestamp, self.tz)
        return f" {event_time} : {self.format_record(rec)}"


def format_record(rec: FlowRecord, tz: Optional[tzinfo] = None) -> str:
    """Format a record as a complete output line."""
    return RecordFormatter(tz).format_line(rec)
