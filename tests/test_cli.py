"""
Tests for CLI functionality.
"""

import logging
from unittest.mock import Mock, patch

import pytest

from conftest import make_client_error, set_pages
from vpc_flowlog_viewer.aws_utils import AWSOperationError
from vpc_flowlog_viewer.cli import (
    ArgumentParser,
    ConfigurationBuilder,
    InventoryPrinter,
    ResultReporter,
    main,
)
from vpc_flowlog_viewer.config import ViewerConfig
from vpc_flowlog_viewer.parser import MalformedRecordError
from vpc_flowlog_viewer.viewer import ViewResult, ViewStatus


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep CLI runs from writing log files under the home directory."""
    with patch(
        "vpc_flowlog_viewer.cli.setup_logger",
        return_value=logging.getLogger("vpc-flowlog-viewer-test"),
    ):
        yield


class TestArgumentParser:
    """Test CLI argument parsing."""

    def test_argument_parser_basic_args(self):
        """Test basic argument parsing."""
        test_args = ["--region", "us-east-1", "--vpc-id", "vpc-12345", "--eni", "eni-1"]

        with patch("sys.argv", ["vpc-flowlog-viewer"] + test_args):
            args = ArgumentParser.parse_args()

        assert args.region == "us-east-1"
        assert args.vpc_id == "vpc-12345"
        assert args.eni == "eni-1"
        assert args.timezone is None
        assert args.page_size is None
        assert not args.skip_malformed

    def test_short_flags(self):
        """Test the -R/-V/-E aliases."""
        args = ArgumentParser.parse_args(["-R", "us-east-2", "-V", "vpc-1", "-E", "eni-2"])

        assert (args.region, args.vpc_id, args.eni) == ("us-east-2", "vpc-1", "eni-2")

    def test_region_is_required(self):
        """Test a missing region is a usage error."""
        with pytest.raises(SystemExit) as excinfo:
            ArgumentParser.parse_args(["--vpc-id", "vpc-1"])
        assert excinfo.value.code == 2

    def test_configuration_builder(self):
        """Test arguments map onto ViewerConfig."""
        args = ArgumentParser.parse_args(
            ["-R", "us-east-1", "-V", "vpc-1", "--timezone", "UTC", "--page-size", "100"]
        )

        config = ConfigurationBuilder(args).build_configuration()

        assert config == ViewerConfig(
            region="us-east-1", vpc_id="vpc-1", timezone="UTC", page_size=100
        )


class TestInventoryPrinter:
    """Test listing output."""

    def test_print_vpcs(self, capsys):
        InventoryPrinter.print_vpcs([{"VpcId": "vpc-1", "CidrBlock": "10.0.0.0/16"}])

        output = capsys.readouterr().out
        assert "List of VPC's to choose from:" in output
        assert "   VPC ID: vpc-1  - [ CIDR: 10.0.0.0/16 ]" in output
        assert "-V parameter" in output

    def test_print_network_interfaces(self, capsys):
        InventoryPrinter.print_network_interfaces(
            [
                {
                    "NetworkInterfaceId": "eni-1",
                    "PrivateDnsName": "ip-10-0-0-5.ec2.internal",
                    "PrivateIpAddress": "10.0.0.5",
                    "Status": "in-use",
                    "Association": {"PublicDnsName": "ec2-1.aws", "PublicIp": "3.3.3.3"},
                    "Description": "primary",
                    "VpcId": "vpc-1",
                    "SubnetId": "subnet-1",
                    "InterfaceType": "interface",
                },
                {"NetworkInterfaceId": "eni-2", "Status": "available"},
            ]
        )

        output = capsys.readouterr().out
        assert "eni-1: ip-10-0-0-5.ec2.internal [10.0.0.5]" in output
        assert "  Public DNS/IP: ec2-1.aws [3.3.3.3]" in output
        assert "  VPC/Network: vpc-1 [subnet-1]" in output
        assert output.count("Public DNS/IP") == 1


class TestResultReporter:
    """Test informational messages."""

    def test_no_subscription_message(self, capsys):
        ResultReporter.report(
            ViewResult(status=ViewStatus.NO_SUBSCRIPTION),
            ViewerConfig(region="us-east-1", vpc_id="vpc-1"),
        )
        assert "No VPC Flow Logs defined for the VPC vpc-1" in capsys.readouterr().out

    def test_no_matching_streams_message(self, capsys):
        ResultReporter.report(
            ViewResult(status=ViewStatus.NO_STREAMS, log_group="group"),
            ViewerConfig(region="us-east-1", vpc_id="vpc-1", eni_prefix="eni-abc"),
        )
        assert "No log streams starting with eni-abc" in capsys.readouterr().out

    def test_complete_is_silent(self, capsys):
        ResultReporter.report(
            ViewResult(status=ViewStatus.COMPLETE, records_written=3),
            ViewerConfig(region="us-east-1", vpc_id="vpc-1"),
        )
        assert capsys.readouterr().out == ""


class TestMain:
    """Test exit behaviour of the CLI entry point."""

    def test_view_success(self):
        with patch(
            "vpc_flowlog_viewer.cli.view_vpc_flow_logs",
            return_value=ViewResult(status=ViewStatus.COMPLETE, records_written=2),
        ) as mock_view:
            assert main(["-R", "us-east-1", "-V", "vpc-1"]) == 0

        config = mock_view.call_args.args[0]
        assert config.vpc_id == "vpc-1"

    def test_no_subscription_exits_zero(self, capsys):
        with patch(
            "vpc_flowlog_viewer.cli.view_vpc_flow_logs",
            return_value=ViewResult(status=ViewStatus.NO_SUBSCRIPTION),
        ):
            assert main(["-R", "us-east-1", "-V", "vpc-1"]) == 0

        assert "No VPC Flow Logs defined" in capsys.readouterr().out

    def test_aws_error_exits_one(self, capsys):
        error = AWSOperationError(
            "getting Flow Log information", make_client_error("DescribeFlowLogs")
        )
        with patch("vpc_flowlog_viewer.cli.view_vpc_flow_logs", side_effect=error):
            assert main(["-R", "us-east-1", "-V", "vpc-1"]) == 1

        output = capsys.readouterr().out
        assert "Error: there was an error getting Flow Log information" in output
        assert "Traceback" not in output

    def test_invalid_page_size_exits_one(self, capsys):
        assert main(["-R", "us-east-1", "-V", "vpc-1", "--page-size", "0"]) == 1
        assert "Page size must be between" in capsys.readouterr().out

    def test_unknown_timezone_exits_one(self, capsys):
        assert main(["-R", "us-east-1", "-V", "vpc-1", "--timezone", "Mars/Base"]) == 1
        assert "Unknown time zone" in capsys.readouterr().out

    def test_lists_vpcs_without_vpc_id(self, capsys):
        ec2_client = Mock()
        set_pages(
            ec2_client,
            "describe_vpcs",
            [{"Vpcs": [{"VpcId": "vpc-1", "CidrBlock": "10.0.0.0/16"}]}],
        )
        with patch(
            "vpc_flowlog_viewer.cli.AWSClientFactory.create_client",
            return_value=ec2_client,
        ) as mock_create:
            assert main(["-R", "us-east-1"]) == 0

        mock_create.assert_called_once_with("ec2", "us-east-1", None)
        assert "VPC ID: vpc-1" in capsys.readouterr().out

    def test_list_enis(self, capsys):
        ec2_client = Mock()
        set_pages(
            ec2_client,
            "describe_network_interfaces",
            [{"NetworkInterfaces": [{"NetworkInterfaceId": "eni-9", "Status": "in-use"}]}],
        )
        with patch(
            "vpc_flowlog_viewer.cli.AWSClientFactory.create_client",
            return_value=ec2_client,
        ):
            assert main(["-R", "us-east-1", "--list-enis", "--ip", "10.0.0.5"]) == 0

        ec2_client._paginators["describe_network_interfaces"].paginate.assert_called_once_with(
            Filters=[{"Name": "private-ip-address", "Values": ["10.0.0.5"]}]
        )
        assert "eni-9:" in capsys.readouterr().out

    def test_list_enis_rejects_ip_and_eni(self, capsys):
        assert (
            main(["-R", "us-east-1", "--list-enis", "--ip", "10.0.0.5", "-E", "eni-1"])
            == 1
        )
        assert "Do not specify" in capsys.readouterr().out

    def test_malformed_record_exits_one(self, capsys):
        error = MalformedRecordError("2 123456789012 garbage", 3)
        with patch("vpc_flowlog_viewer.cli.view_vpc_flow_logs", side_effect=error):
            assert main(["-R", "us-east-1", "-V", "vpc-1"]) == 1

        output = capsys.readouterr().out
        assert "Error: Malformed flow log record" in output
        assert "Traceback" not in output

    def test_logging_setup_failure_exits_one(self, capsys):
        with patch(
            "vpc_flowlog_viewer.cli.setup_logger",
            side_effect=PermissionError("Permission denied: '/home/nobody'"),
        ):
            assert main(["-R", "us-east-1", "-V", "vpc-1"]) == 1

        assert "Error: Permission denied" in capsys.readouterr().out
