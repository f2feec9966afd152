"""Tests for settings and the command line entry point."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import ValidationError

from directswap.__main__ import build_parser, main, settings_from_args
from directswap.config import Settings
from directswap.errors import CalldataGenerationFailed
from directswap.signing.base import KeyNotFoundError

from conftest import TEST_MNEMONIC


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.asset_in == "USDT"
        assert settings.asset_out == "ORN"
        assert settings.slippage_tolerance == Decimal("0.99")
        assert settings.decimals == 8
        assert settings.swap_gas_limit == 600000
        assert settings.approval_gas_limit == 100000
        assert settings.wait_for_approval is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("AMOUNT_IN", "2.5")
        monkeypatch.setenv("SLIPPAGE_TOLERANCE", "0.95")

        settings = Settings(_env_file=None)

        assert settings.amount_in == Decimal("2.5")
        assert settings.slippage_tolerance == Decimal("0.95")

    @pytest.mark.parametrize("tolerance", ["0", "-0.1", "1.5"])
    def test_slippage_out_of_range(self, tolerance):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, slippage_tolerance=tolerance)

    def test_symbols_upper_cased(self):
        settings = Settings(_env_file=None, asset_in=" usdt", asset_out="orn")

        assert settings.asset_in == "USDT"
        assert settings.asset_out == "ORN"

    def test_has_wallet(self):
        assert not Settings(_env_file=None).has_wallet
        assert not Settings(_env_file=None, wallet_seed_phrase="too short").has_wallet
        assert Settings(_env_file=None, wallet_seed_phrase=TEST_MNEMONIC).has_wallet

    def test_safe_dict_redacts_seed_phrase(self):
        settings = Settings(_env_file=None, wallet_seed_phrase=TEST_MNEMONIC)

        safe = settings.get_safe_dict()

        assert safe["wallet_configured"] is True
        assert TEST_MNEMONIC not in str(safe)
        assert "wallet_seed_phrase" not in safe


class TestCommandLine:
    """Tests for CLI argument handling."""

    def test_flags_override_settings(self):
        args = build_parser().parse_args(
            ["--amount", "0.5", "--asset-in", "busd", "--slippage", "0.97", "--gas-limit", "700000"]
        )

        settings = settings_from_args(args)

        assert settings.amount_in == Decimal("0.5")
        assert settings.asset_in == "BUSD"
        assert settings.slippage_tolerance == Decimal("0.97")
        assert settings.swap_gas_limit == 700000

    def test_unset_flags_keep_defaults(self):
        settings = settings_from_args(build_parser().parse_args([]))

        assert settings.asset_out == "ORN"
        assert settings.wait_for_approval is False

    def test_wait_approval_flag(self):
        settings = settings_from_args(build_parser().parse_args(["--wait-approval", "--timeout", "0"]))

        assert settings.wait_for_approval is True
        assert settings.confirmation_timeout == 0

    def test_invalid_slippage_exit_code(self):
        assert main(["--slippage", "1.5"]) == 2

    def test_success_exit_code(self, capsys):
        result = MagicMock()
        result.to_dict.return_value = {"tx_hash": "0xabc"}
        executor = MagicMock()
        executor.execute = AsyncMock(return_value=result)

        with patch("directswap.__main__.SwapExecutor", return_value=executor):
            code = main(["--amount", "0.1"])

        assert code == 0
        assert '"tx_hash": "0xabc"' in capsys.readouterr().out

    def test_pipeline_failure_exit_code(self):
        executor = MagicMock()
        executor.execute = AsyncMock(side_effect=CalldataGenerationFailed("HTTP 500"))

        with patch("directswap.__main__.SwapExecutor", return_value=executor):
            assert main([]) == 1

    def test_missing_wallet_exit_code(self):
        executor = MagicMock()
        executor.execute = AsyncMock(side_effect=KeyNotFoundError("no seed phrase"))

        with patch("directswap.__main__.SwapExecutor", return_value=executor):
            assert main([]) == 2
