"""
Pytest configuration and fixtures for VPC Flow Log Viewer tests.
"""

from datetime import timezone
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from vpc_flowlog_viewer.aws_utils import (
    FlowLogSubscriptionFinder,
    LogEventPaginator,
    LogStreamLister,
)
from vpc_flowlog_viewer.formatter import RecordFormatter
from vpc_flowlog_viewer.viewer import FlowLogResolver, FlowLogViewer

ACCEPT_LINE = (
    "2 123456789012 eni-1a2b3c4d 10.0.0.5 10.0.0.9 443 51000 6 10 840 "
    "1618000000 1618000060 ACCEPT OK"
)
REJECT_LINE = (
    "2 123456789012 eni-1a2b3c4d 203.0.113.12 10.0.0.5 49152 22 6 1 40 "
    "1618000000 1618000060 REJECT OK"
)
NODATA_LINE = (
    "2 123456789012 eni-1a2b3c4d - - - - - - - 1618000000 1618000060 - NODATA"
)
EVENT_TIMESTAMP = 1618000060000


def make_event(message: str, timestamp: int = EVENT_TIMESTAMP) -> dict:
    return {"timestamp": timestamp, "message": message, "ingestionTime": timestamp}


def make_page(messages: list[str], token: str | None) -> dict:
    page: dict = {"events": [make_event(m) for m in messages]}
    if token is not None:
        page["nextForwardToken"] = token
        page["nextBackwardToken"] = "b/" + token
    return page


def make_client_error(operation: str, code: str = "AccessDeniedException") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "denied"}}, operation)


def set_pages(client: Mock, method: str, pages: list[dict]) -> None:
    """Make client.get_paginator(method).paginate() yield the given pages."""
    paginator = Mock()
    paginator.paginate.return_value = pages
    paginators = getattr(client, "_paginators", None)
    if not isinstance(paginators, dict):
        paginators = {}
    paginators[method] = paginator
    client._paginators = paginators
    client.get_paginator.side_effect = lambda name: paginators[name]


@pytest.fixture
def ec2_client():
    """Fake EC2 client with one CloudWatch Logs flow log for vpc-12345."""
    client = Mock()
    set_pages(
        client,
        "describe_flow_logs",
        [
            {
                "FlowLogs": [
                    {
                        "FlowLogId": "fl-0001",
                        "ResourceId": "vpc-12345",
                        "LogDestinationType": "cloud-watch-logs",
                        "LogGroupName": "vpc-flow-logs",
                    }
                ]
            }
        ],
    )
    return client


@pytest.fixture
def logs_client():
    """Fake CloudWatch Logs client with a single stream."""
    client = Mock()
    set_pages(
        client,
        "describe_log_streams",
        [{"logStreams": [{"logStreamName": "eni-1a2b3c4d-all"}]}],
    )
    client.get_log_events.side_effect = [
        make_page([ACCEPT_LINE], "f/1"),
        make_page([], "f/1"),
    ]
    return client


@pytest.fixture
def make_viewer():
    """Build a FlowLogViewer over fake clients, rendering in UTC."""

    def _make(ec2_client, logs_client, out, **kwargs):
        resolver = FlowLogResolver(
            FlowLogSubscriptionFinder(ec2_client), LogStreamLister(logs_client)
        )
        return FlowLogViewer(
            resolver,
            LogEventPaginator(logs_client),
            RecordFormatter(timezone.utc),
            out=out,
            **kwargs,
        )

    return _make
