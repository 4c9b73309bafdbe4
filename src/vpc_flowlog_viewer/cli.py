"""
Command-line interface for VPC Flow Log Viewer.
"""

import argparse
import logging
from typing import Any, Optional, Sequence

from .aws_utils import AWSClientFactory, AWSOperationError, NetworkLister
from .config import DefaultConfiguration, ViewerConfig
from .logging_utils import (
    PACKAGE_LOGGER,
    generate_query_id,
    log_query_end,
    log_query_start,
    setup_logger,
)
from .viewer import ViewResult, ViewStatus, view_vpc_flow_logs

OUTPUT_FORMAT = (
    "<time> : <ENI> : <source IP>[<source port>] --> "
    "<destination IP>[<destination port>] : <protocol> : <action> <status>"
)


class ArgumentParser:
    """Handles command-line argument parsing."""

    @classmethod
    def build_parser(cls) -> argparse.ArgumentParser:
        """Build the argument parser."""
        parser = argparse.ArgumentParser(
            description="View VPC Flow Log data in an easy to read format.",
            epilog=(
                f"OUTPUT: {OUTPUT_FORMAT}\n"
                "Lines that are not ACCEPT OK end with '  <-'.\n\n"
                "EXAMPLE: vpc-flowlog-viewer -R us-east-1 -V vpc-0c5b4e0c96815b5b7"
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        cls._add_aws_args(parser)
        cls._add_selection_args(parser)
        cls._add_output_args(parser)

        return parser

    @classmethod
    def parse_args(cls, argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
        """Parse and return command-line arguments."""
        return cls.build_parser().parse_args(argv)

    @staticmethod
    def _add_aws_args(parser: argparse.ArgumentParser) -> None:
        """Add AWS-related arguments."""
        parser.add_argument(
            "-R",
            "--region",
            required=True,
            help="AWS region that holds the VPC and its flow logs",
        )
        parser.add_argument("--profile", help="AWS profile name to use for API calls")

    @staticmethod
    def _add_selection_args(parser: argparse.ArgumentParser) -> None:
        """Add arguments selecting what to view."""
        parser.add_argument(
            "-V",
            "--vpc-id",
            help="VPC whose flow log to view (lists VPCs when omitted)",
        )
        parser.add_argument(
            "-E",
            "--eni",
            help="Only view log streams whose name starts with this ENI ID",
        )
        parser.add_argument(
            "--list-enis",
            action="store_true",
            help="List network interfaces instead of viewing flow logs",
        )
        parser.add_argument(
            "--ip",
            help="Private IP address to look up with --list-enis",
        )

    @staticmethod
    def _add_output_args(parser: argparse.ArgumentParser) -> None:
        """Add output-related arguments."""
        parser.add_argument(
            "--timezone",
            default=DefaultConfiguration.DEFAULT_TIMEZONE,
            help="Time zone for event times, e.g. 'UTC' or 'Europe/Paris' (default: local)",
        )
        parser.add_argument(
            "--page-size",
            type=int,
            default=DefaultConfiguration.DEFAULT_PAGE_SIZE,
            help=f"Events per request (1-{DefaultConfiguration.MAX_PAGE_SIZE})",
        )
        parser.add_argument(
            "--skip-malformed",
            action="store_true",
            help="Warn about and skip log lines that do not match the flow log format",
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug output to see detailed processing information",
        )


class ConfigurationBuilder:
    """Builds configuration from arguments."""

    def __init__(self, args: argparse.Namespace):
        self.args = args

    def build_configuration(self) -> ViewerConfig:
        """Build and validate configuration from arguments."""
        config = ViewerConfig(
            region=self.args.region,
            vpc_id=self.args.vpc_id,
            eni_prefix=self.args.eni,
            profile=self.args.profile,
            timezone=self.args.timezone,
            page_size=self.args.page_size,
            skip_malformed=self.args.skip_malformed,
            debug=self.args.debug,
            list_enis=self.args.list_enis,
            ip_address=self.args.ip,
        )
        config.validate()
        return config


class InventoryPrinter:
    """Handles printing VPC and network interface listings."""

    @staticmethod
    def print_vpcs(vpcs: list[dict[str, Any]]) -> None:
        """Print VPCs to choose from."""
        print("List of VPC's to choose from:")
        for vpc in vpcs:
            print(f"   VPC ID: {vpc['VpcId']}  - [ CIDR: {vpc.get('CidrBlock', '')} ]")
        print("")
        print("Re-run and specify a specific VPC ID using the -V parameter")

    @staticmethod
    def print_network_interfaces(interfaces: list[dict[str, Any]]) -> None:
        """Print one block per network interface."""
        for eni in interfaces:
            print(
                f"{eni['NetworkInterfaceId']}: {eni.get('PrivateDnsName', '')} "
                f"[{eni.get('PrivateIpAddress', '')}]"
            )
            print(f"  Status: {eni.get('Status', '')}")
            if association := eni.get("Association"):
                print(
                    f"  Public DNS/IP: {association.get('PublicDnsName', '')} "
                    f"[{association.get('PublicIp', '')}]"
                )
            print(f"  Description: {eni.get('Description', '')}")
            print(f"  VPC/Network: {eni.get('VpcId', '')} [{eni.get('SubnetId', '')}]")
            print(f"  Interface Type: {eni.get('InterfaceType', '')}")
            print("")


class ResultReporter:
    """Reports the outcome of a viewer run that produced no records by design."""

    @staticmethod
    def report(result: ViewResult, config: ViewerConfig) -> None:
        """Print informational messages for empty configurations."""
        match result.status:
            case ViewStatus.NO_SUBSCRIPTION:
                print(f"No VPC Flow Logs defined for the VPC {config.vpc_id}")
            case ViewStatus.NO_STREAMS if config.eni_prefix:
                print(
                    f"No log streams starting with {config.eni_prefix} "
                    f"in log group {result.log_group}"
                )
            case ViewStatus.NO_STREAMS:
                print(f"No log streams in log group {result.log_group}")
            case _:
                pass

        if result.malformed_skipped:
            print(f"Skipped {result.malformed_skipped} malformed log lines")


def run(config: ViewerConfig) -> dict[str, Any]:
    """Run the mode selected by the configuration and return a summary."""
    if config.list_enis or not config.vpc_id:
        lister = NetworkLister(
            AWSClientFactory.create_client("ec2", config.region, config.profile)
        )
        if config.list_enis:
            interfaces = lister.list_network_interfaces(
                config.ip_address, config.eni_prefix, config.vpc_id
            )
            InventoryPrinter.print_network_interfaces(interfaces)
            return {"mode": "list-enis", "interfaces": len(interfaces)}

        vpcs = lister.list_vpcs()
        InventoryPrinter.print_vpcs(vpcs)
        return {"mode": "list-vpcs", "vpcs": len(vpcs)}

    result = view_vpc_flow_logs(config)
    ResultReporter.report(result, config)
    return {
        "mode": "view",
        "status": result.status.value,
        "log_group": result.log_group,
        "streams": len(result.streams),
        "records": result.records_written,
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = ArgumentParser.parse_args(argv)
    logger = logging.getLogger(PACKAGE_LOGGER)
    query_id = generate_query_id()

    try:
        logger = setup_logger(debug=args.debug)
        config = ConfigurationBuilder(args).build_configuration()

        log_query_start(
            logger,
            query_id,
            region=config.region,
            vpc_id=config.vpc_id,
            eni=config.eni_prefix,
            profile=config.profile,
        )

        summary = run(config)

        log_query_end(logger, query_id, True, **summary)
        return 0

    except AWSOperationError as e:
        log_query_end(logger, query_id, False, operation=e.operation, error=str(e.cause))
        print(f"Error: {e}")
        _print_debug_traceback(args)
        return 1
    except (ValueError, RuntimeError, OSError) as e:
        log_query_end(logger, query_id, False, error=str(e))
        print(f"Error: {e}")
        _print_debug_traceback(args)
        return 1
    except KeyboardInterrupt:
        log_query_end(logger, query_id, False, error="Interrupted")
        return 130
    except Exception as e:
        log_query_end(logger, query_id, False, error=str(e))
        print(f"Unexpected error: {e}")
        _print_debug_traceback(args)
        return 1


def _print_debug_traceback(args: argparse.Namespace) -> None:
    if args.debug:
        import traceback

        print(f"[DEBUG] Full traceback: {traceback.format_exc()}")
