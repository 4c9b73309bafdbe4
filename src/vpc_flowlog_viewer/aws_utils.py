"""
AWS utilities for VPC Flow Log Viewer.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .parser import RawLogLine

logger = logging.getLogger(__name__)


class AWSOperationError(RuntimeError):
    """Raised when a remote AWS call fails; names the operation that failed."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"there was an error {operation}: {cause}")


def call_aws(operation: str, func: Callable[..., Any], **kwargs: Any) -> Any:
    """Invoke a client method, converting botocore failures to AWSOperationError."""
    try:
        return func(**kwargs)
    except (ClientError, BotoCoreError) as e:
        raise AWSOperationError(operation, e) from e


def paginate_aws(
    operation: str, client: Any, method: str, **kwargs: Any
) -> Iterator[dict[str, Any]]:
    """Yield pages from a boto3 paginator, converting botocore failures."""
    try:
        paginator = client.get_paginator(method)
        yield from paginator.paginate(**kwargs)
    except (ClientError, BotoCoreError) as e:
        raise AWSOperationError(operation, e) from e


class AWSClientFactory:
    """Factory for creating AWS clients with consistent configuration."""

    @staticmethod
    def create_client(
        service: str, region: Optional[str] = None, profile: Optional[str] = None
    ) -> Any:
        """Create a boto3 client with optional profile and region."""
        try:
            session = (
                boto3.Session(profile_name=profile) if profile else boto3.Session()
            )
            return session.client(service, region_name=region)
        except BotoCoreError as e:
            raise AWSOperationError("authenticating with AWS", e) from e


@dataclass(frozen=True)
class FlowLogSubscription:
    """Binding of a VPC to the CloudWatch Logs group that receives its flow logs."""

    flow_log_id: str
    resource_id: str
    log_group: str


class FlowLogSubscriptionFinder:
    """Finds the flow log subscription attached to a VPC."""

    def __init__(self, ec2_client: Any):
        self.ec2_client = ec2_client

    def find_subscription(self, vpc_id: str) -> Optional[FlowLogSubscription]:
        """Return the first CloudWatch Logs flow log for the VPC, or None."""
        candidates = []
        for page in paginate_aws(
            "getting Flow Log information",
            self.ec2_client,
            "describe_flow_logs",
            Filters=[{"Name": "resource-id", "Values": [vpc_id]}],
        ):
            candidates.extend(page.get("FlowLogs", []))

        # S3 destinations carry no log group
        with_group = [fl for fl in candidates if fl.get("LogGroupName")]
        if not with_group:
            logger.debug(
                f"No CloudWatch Logs flow log for {vpc_id} "
                f"({len(candidates)} flow logs found)"
            )
            return None

        if len(with_group) > 1:
            logger.warning(
                f"{len(with_group)} flow logs found for {vpc_id}, using "
                f"{with_group[0].get('FlowLogId')}"
            )

        flow_log = with_group[0]
        return FlowLogSubscription(
            flow_log_id=flow_log.get("FlowLogId", ""),
            resource_id=flow_log.get("ResourceId", vpc_id),
            log_group=flow_log["LogGroupName"],
        )


class LogStreamLister:
    """Enumerates log streams in a log group."""

    def __init__(self, logs_client: Any):
        self.logs_client = logs_client

    def list_streams(
        self, log_group: str, prefix: Optional[str] = None
    ) -> list[str]:
        """List stream names in service order, optionally narrowed by name prefix."""
        params: dict[str, Any] = {"logGroupName": log_group}
        if prefix:
            params["logStreamNamePrefix"] = prefix

        names = []
        for page in paginate_aws(
            "getting log streams", self.logs_client, "describe_log_streams", **params
        ):
            names.extend(stream["logStreamName"] for stream in page.get("logStreams", []))

        logger.debug(f"Found {len(names)} log streams in {log_group}")
        return names


# Distinct from every token the service can return
_FIRST_PAGE = object()


class LogEventPaginator:
    """Drives GetLogEvents forward through one log stream until it is exhausted."""

    def __init__(self, logs_client: Any, page_size: Optional[int] = None):
        self.logs_client = logs_client
        self.page_size = page_size

    def paginate(self, log_group: str, stream_name: str) -> Iterator[RawLogLine]:
        """
        Yield every event of a stream, oldest first.

        CloudWatch Logs never omits the forward token: at the end of a
        stream it hands back the token that was just sent. The stream is
        done when the token returned matches the previous one.
        """
        previous_token: object = _FIRST_PAGE
        next_token: Optional[str] = None
        page_count = 0

        while True:
            response = self._fetch_page(log_group, stream_name, next_token)
            current_token = response.get("nextForwardToken")

            if current_token == previous_token:
                break

            page_count += 1
            for event in response.get("events", []):
                yield RawLogLine.from_event(event)

            if current_token is None:
                break

            previous_token = current_token
            next_token = current_token

        logger.debug(f"Read {page_count} pages from {log_group}/{stream_name}")

    def _fetch_page(
        self, log_group: str, stream_name: str, token: Optional[str]
    ) -> dict[str, Any]:
        """Request one page of events."""
        params: dict[str, Any] = {
            "logGroupName": log_group,
            "logStreamName": stream_name,
            "startFromHead": True,
        }
        if token is not None:
            params["nextToken"] = token
        if self.page_size:
            params["limit"] = self.page_size

        return call_aws(  # type: ignore[no-any-return]
            "getting log stream content", self.logs_client.get_log_events, **params
        )


class NetworkLister:
    """Lists VPCs and network interfaces for choosing what to view."""

    def __init__(self, ec2_client: Any):
        self.ec2_client = ec2_client

    def list_vpcs(self) -> list[dict[str, Any]]:
        """List available VPCs."""
        vpcs = []
        for page in paginate_aws(
            "getting a list of VPC's",
            self.ec2_client,
            "describe_vpcs",
            Filters=[{"Name": "state", "Values": ["available"]}],
        ):
            vpcs.extend(page.get("Vpcs", []))
        return vpcs

    def list_network_interfaces(
        self,
        ip_address: Optional[str] = None,
        eni_id: Optional[str] = None,
        vpc_id: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """List ENIs by private IP, by ID, or all available/in-use ones."""
        params = self._build_eni_params(ip_address, eni_id, vpc_id)
        interfaces = []
        for page in paginate_aws(
            "listing network interfaces",
            self.ec2_client,
            "describe_network_interfaces",
            **params,
        ):
            interfaces.extend(page.get("NetworkInterfaces", []))
        return interfaces

    @staticmethod
    def _build_eni_params(
        ip_address: Optional[str], eni_id: Optional[str], vpc_id: Optional[str]
    ) -> dict[str, Any]:
        """Build DescribeNetworkInterfaces parameters."""
        filters: list[dict[str, Any]] = []
        params: dict[str, Any] = {}

        if ip_address:
            filters.append({"Name": "private-ip-address", "Values": [ip_address]})
        elif eni_id:
            params["NetworkInterfaceIds"] = [eni_id]
        else:
            filters.append({"Name": "status", "Values": ["available", "in-use"]})

        if vpc_id:
            filters.append({"Name": "vpc-id", "Values": [vpc_id]})

        if filters:
            params["Filters"] = filters
        return params
