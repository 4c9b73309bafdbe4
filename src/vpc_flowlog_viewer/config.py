"""
Configuration module for VPC Flow Log Viewer.
"""

from dataclasses import dataclass
from typing import Final, Optional

from .time_utils import resolve_timezone


class DefaultConfiguration:
    """Provides default configuration values."""

    DEFAULT_PAGE_SIZE: Final[Optional[int]] = None  # Let CloudWatch Logs decide
    MAX_PAGE_SIZE: Final[int] = 10000  # GetLogEvents maximum
    DEFAULT_TIMEZONE: Final[Optional[str]] = None  # Local wall-clock time


class FlowLogSchema:
    """Positional layout of a default-format (version 2) VPC Flow Log record."""

    FIELDS: Final[tuple[str, ...]] = (
        "version",
        "account_id",
        "interface_id",
        "source_ip",
        "dest_ip",
        "source_port",
        "dest_port",
        "protocol_number",
        "packets",
        "byte_count",
        "start",
        "end",
        "action",
        "log_status",
    )
    MIN_FIELDS: Final[int] = len(FIELDS)

    ACCEPT: Final[str] = "ACCEPT"
    OK: Final[str] = "OK"
    NODATA: Final[str] = "NODATA"


class ProtocolNames:
    """Maps the protocol numbers the viewer names; anything else passes through."""

    PROTOCOLS: Final[dict[str, str]] = {
        "6": "tcp",
        "17": "udp",
    }


@dataclass
class ViewerConfig:
    """Structured configuration for one viewer run."""

    region: str
    vpc_id: Optional[str] = None
    eni_prefix: Optional[str] = None
    profile: Optional[str] = None
    timezone: Optional[str] = DefaultConfiguration.DEFAULT_TIMEZONE
    page_size: Optional[int] = DefaultConfiguration.DEFAULT_PAGE_SIZE
    skip_malformed: bool = False
    debug: bool = False
    list_enis: bool = False
    ip_address: Optional[str] = None

    def validate(self) -> None:
        """Validate configuration parameters."""
        if not self.region:
            raise ValueError("Region is required")
        if self.page_size is not None and not (
            1 <= self.page_size <= DefaultConfiguration.MAX_PAGE_SIZE
        ):
            raise ValueError(
                f"Page size must be between 1 and {DefaultConfiguration.MAX_PAGE_SIZE}"
            )
        if self.list_enis and self.ip_address and self.eni_prefix:
            raise ValueError("Do not specify an ENI ID and an IP address together")
        # Raises ValueError for unknown zone names
        resolve_timezone(self.timezone)


# Public API - maintain backward compatibility
PROTOCOL_NAMES = ProtocolNames.PROTOCOLS
FLOW_LOG_FIELDS = FlowLogSchema.FIELDS
