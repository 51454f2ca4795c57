"""
Tests for the command-line entry point.

The service is a MagicMock; these tests check argument parsing, dispatch
and exit codes, not the HTTP layer.
"""

import json
import pytest
from unittest.mock import MagicMock, patch

from src.app import cli
from src.models.errors import OrderNotFoundError, SerializationError
from src.models.orders import Order, OrderSnapshot
from src.models.requests import CancelOrderMultiRequest

from .test_orders import make_order_raw


def make_service() -> MagicMock:
    service = MagicMock()
    service.list_active.return_value = OrderSnapshot(orders=[Order.from_raw(make_order_raw(1))])
    service.list_historical.return_value = OrderSnapshot()
    service.cancel_one_by_id.return_value = {"status": "SUCCESS"}
    service.cancel_many_by_id.return_value = {"status": "SUCCESS"}
    service.cancel_multi.return_value = {"status": "SUCCESS"}
    return service


class TestParseArgs:
    """Tests for argument parsing."""

    def test_active_defaults(self):
        """active takes an optional symbol."""
        args = cli.parse_args(["active"])

        assert args.command == "active"
        assert args.symbol == ""
        assert args.log_level == "WARNING"

    def test_cancel_many(self):
        """cancel-many collects integer IDs."""
        args = cli.parse_args(["cancel-many", "1", "2", "3"])

        assert args.order_ids == [1, 2, 3]

    def test_command_required(self):
        """A subcommand must be given."""
        with pytest.raises(SystemExit):
            cli.parse_args([])

    def test_build_config_overrides(self, monkeypatch):
        """Flags override environment values."""
        monkeypatch.setenv("BFX_API_URL", "https://env.example/v2/")
        monkeypatch.setenv("BFX_API_TIMEOUT", "9")

        config = cli.build_config(cli.parse_args(["--api-url", "https://flag.example/v2/", "active"]))

        assert config.base_url == "https://flag.example/v2/"
        assert config.timeout == 9.0


class TestRun:
    """Tests for subcommand dispatch."""

    def test_active_prints_orders(self, capsys):
        """Each order is printed as one JSON line."""
        service = make_service()

        cli.run(service, cli.parse_args(["active", "--symbol", "tBTCUSD"]))

        service.list_active.assert_called_once_with("tBTCUSD")
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["id"] == 1

    def test_history_empty(self, capsys):
        """No past orders prints nothing."""
        service = make_service()

        cli.run(service, cli.parse_args(["history"]))

        assert capsys.readouterr().out == ""

    def test_get_history(self):
        """--history searches past orders."""
        service = make_service()

        cli.run(service, cli.parse_args(["get", "7", "--history"]))

        service.get_historical_by_id.assert_called_once_with(7)
        service.get_active_by_id.assert_not_called()

    def test_trades(self):
        """trades passes symbol and ID through."""
        service = make_service()
        service.list_trades_for_order.return_value = []

        cli.run(service, cli.parse_args(["trades", "tBTCUSD", "42"]))

        service.list_trades_for_order.assert_called_once_with("tBTCUSD", 42)

    def test_cancel_commands(self):
        """cancel, cancel-many and cancel-all use the batch endpoints."""
        service = make_service()

        cli.run(service, cli.parse_args(["cancel", "5"]))
        cli.run(service, cli.parse_args(["cancel-many", "1", "2"]))
        cli.run(service, cli.parse_args(["cancel-all"]))

        service.cancel_one_by_id.assert_called_once_with(5)
        service.cancel_many_by_id.assert_called_once_with([1, 2])
        service.cancel_multi.assert_called_once_with(CancelOrderMultiRequest(all_orders=True))


class TestMain:
    """Tests for the main entry point."""

    def test_not_found_exit_code(self, capsys):
        """Known errors print to stderr and return 1."""
        with patch("src.app.cli.RestClient"), patch("src.app.cli.OrderService") as service_cls:
            service_cls.return_value.get_active_by_id.side_effect = OrderNotFoundError(5)

            exit_code = cli.main(["get", "5"])

        assert exit_code == 1
        assert "Order 5 not found" in capsys.readouterr().err

    def test_success_exit_code(self):
        """Successful commands return 0."""
        with patch("src.app.cli.RestClient"), patch("src.app.cli.OrderService") as service_cls:
            service_cls.return_value = make_service()

            assert cli.main(["active"]) == 0

    def test_bad_timeout_env(self, monkeypatch, capsys):
        """An unparseable BFX_API_TIMEOUT is reported, not raised."""
        monkeypatch.setenv("BFX_API_TIMEOUT", "abc")

        with patch("src.app.cli.RestClient") as client_cls:
            exit_code = cli.main(["active"])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err
        client_cls.assert_not_called()

    def test_serialization_error_exit_code(self, capsys):
        """Serialization failures print to stderr and return 1."""
        with patch("src.app.cli.RestClient"), patch("src.app.cli.OrderService") as service_cls:
            service_cls.return_value.cancel_multi.side_effect = SerializationError("Failed to encode payload")

            exit_code = cli.main(["cancel-all"])

        assert exit_code == 1
        assert "Failed to encode payload" in capsys.readouterr().err
