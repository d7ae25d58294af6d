"""Tests for the command line interface."""

from click.testing import CliRunner

from dummy_builder.cli import cli
from dummy_builder.config import Config


def test_run_help_lists_options():
    result = CliRunner().invoke(cli, ["run", "--help"])

    assert result.exit_code == 0
    for option in (
        "--beacon-node",
        "--payload-attributes-cache",
        "--payload-cache",
        "--payload-body-bytes",
        "--payload-value",
        "--no-sse-reconnect",
    ):
        assert option in result.output


def test_invalid_secret_key_rejected():
    result = CliRunner().invoke(cli, ["run", "--secret-key", "0xzz"])
    assert result.exit_code == 2

    result = CliRunner().invoke(cli, ["run", "--secret-key", "0x" + "01" * 16])
    assert result.exit_code == 2


def test_cache_sizes_must_be_positive():
    result = CliRunner().invoke(cli, ["run", "--payload-cache", "0"])
    assert result.exit_code == 2


def test_config_secret_key():
    assert Config().secret_key_int is None
    assert Config(secret_key="0x" + "00" * 31 + "05").secret_key_int == 5


def test_payload_body_bytes_capped_at_transaction_limit():
    result = CliRunner().invoke(cli, ["run", "--payload-body-bytes", str(2**30 + 1)])
    assert result.exit_code == 2


def test_version_string():
    from dummy_builder.version import get_version, get_version_string

    assert get_version_string() == f"dummy-builder/v{get_version()}"
    assert get_version() != ""
