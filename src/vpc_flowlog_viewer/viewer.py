"""
Flow log resolution and display for VPC Flow Log Viewer.
"""

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, TextIO

from .aws_utils import (
    AWSClientFactory,
    FlowLogSubscription,
    FlowLogSubscriptionFinder,
    LogEventPaginator,
    LogStreamLister,
)
from .config import ViewerConfig
from .formatter import RecordFormatter
from .parser import FlowRecord, LogLineParser, MalformedRecordError
from .time_utils import resolve_timezone

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    """The subscription found for a VPC and the streams selected from its group."""

    subscription: FlowLogSubscription
    streams: list[str]

    @property
    def log_group(self) -> str:
        return self.subscription.log_group


class FlowLogResolver:
    """Resolves a VPC to its flow log group and the log streams to read."""

    def __init__(
        self,
        subscription_finder: FlowLogSubscriptionFinder,
        stream_lister: LogStreamLister,
    ):
        self.subscription_finder = subscription_finder
        self.stream_lister = stream_lister

    def resolve(
        self, vpc_id: str, eni_prefix: Optional[str] = None
    ) -> Optional[Resolution]:
        """
        Look up the VPC's flow log group and list its streams.

        Returns None when the VPC has no flow log subscription. An ENI
        prefix that matches nothing gives an empty stream list.
        """
        subscription = self.subscription_finder.find_subscription(vpc_id)
        if subscription is None:
            return None

        streams = self.stream_lister.list_streams(subscription.log_group, eni_prefix)
        return Resolution(subscription=subscription, streams=streams)


class ViewStatus(Enum):
    NO_SUBSCRIPTION = "no-subscription"
    NO_STREAMS = "no-streams"
    COMPLETE = "complete"


@dataclass
class ViewResult:
    """Summary of one viewer run."""

    status: ViewStatus
    log_group: Optional[str] = None
    streams: list[str] = field(default_factory=list)
    records_written: int = 0
    malformed_skipped: int = 0


class FlowLogViewer:
    """Streams every flow record of a VPC to an output sink, stream by stream."""

    def __init__(
        self,
        resolver: FlowLogResolver,
        paginator: LogEventPaginator,
        formatter: RecordFormatter,
        parser: Optional[LogLineParser] = None,
        out: Optional[TextIO] = None,
        skip_malformed: bool = False,
    ):
        self.resolver = resolver
        self.paginator = paginator
        self.formatter = formatter
        self.parser = parser or LogLineParser()
        self.out = out
        self.skip_malformed = skip_malformed

    def view(self, vpc_id: str, eni_prefix: Optional[str] = None) -> ViewResult:
        """Resolve the VPC and write each visible record, one line per record."""
        resolution = self.resolver.resolve(vpc_id, eni_prefix)
        if resolution is None:
            return ViewResult(status=ViewStatus.NO_SUBSCRIPTION)

        result = ViewResult(
            status=ViewStatus.COMPLETE if resolution.streams else ViewStatus.NO_STREAMS,
            log_group=resolution.log_group,
            streams=resolution.streams,
        )

        out = self.out or sys.stdout
        for stream_name in resolution.streams:
            logger.debug(f"Reading log stream {stream_name}")
            for record in self.records(resolution.log_group, stream_name, result):
                print(self.formatter.format_line(record), file=out)
                result.records_written += 1

        return result

    def records(
        self, log_group: str, stream_name: str, result: ViewResult
    ) -> Iterator[FlowRecord]:
        """Yield the displayable records of one stream in service order."""
        for raw in self.paginator.paginate(log_group, stream_name):
            try:
                record = self.parser.parse_line(raw)
            except MalformedRecordError as e:
                if not self.skip_malformed:
                    raise
                logger.warning(f"Skipping line in {stream_name}: {e}")
                result.malformed_skipped += 1
                continue

            if record is not None:
                yield record


# Public API functions
def create_viewer(config: ViewerConfig, out: Optional[TextIO] = None) -> FlowLogViewer:
    """Wire a FlowLogViewer to real AWS clients for the configured region."""
    ec2_client = AWSClientFactory.create_client("ec2", config.region, config.profile)
    logs_client = AWSClientFactory.create_client("logs", config.region, config.profile)

    resolver = FlowLogResolver(
        FlowLogSubscriptionFinder(ec2_client), LogStreamLister(logs_client)
    )
    return FlowLogViewer(
        resolver,
        LogEventPaginator(logs_client, config.page_size),
        RecordFormatter(resolve_timezone(config.timezone)),
        out=out,
        skip_malformed=config.skip_malformed,
    )


def view_vpc_flow_logs(config: ViewerConfig, out: Optional[TextIO] = None) -> ViewResult:
    """Print the flow records of the configured VPC."""
    if not config.vpc_id:
        raise ValueError("VPC ID is required to view flow logs")
    return create_viewer(config, out).view(config.vpc_id, config.eni_prefix)
