"""
Unit tests for the command line entry point
"""

import json
from unittest.mock import AsyncMock, patch

import pytest

from nft_search import main as cli
from nft_search.utils.exceptions import RpcError


@pytest.fixture
def cli_args(contract_address, owner_address, collection_addresses):
    return [
        "--rpc-url", "http://localhost:8545",
        "--contract", contract_address,
        "--owner", owner_address,
        "--collection", collection_addresses[0],
        "--collection", collection_addresses[1],
        "--limit", "5",
    ]


class TestParseArgs:

    def test_repeatable_collection(self, cli_args, collection_addresses):
        args = cli.parse_args(cli_args)
        assert args.collections == collection_addresses
        assert args.limit == 5
        assert args.log_level == "INFO"
        assert args.config is None

    def test_defaults_are_none(self):
        args = cli.parse_args([])
        assert args.rpc_url is None
        assert args.collections is None
        assert args.block is None


class TestMain:
    """Test main() with search() mocked out"""

    @pytest.mark.asyncio
    async def test_success_writes_output(self, tmp_path, cli_args, sample_results):
        output = tmp_path / "out" / "results.json"

        with patch.object(cli, "setup_logging"), \
                patch.object(cli, "search", AsyncMock(return_value=sample_results)) as mock_search:
            exit_code = await cli.main(cli_args + ["--output", str(output)])

        assert exit_code == 0
        config = mock_search.await_args.args[0]
        assert config.limit == 5
        assert config.block == "latest"

        saved = json.loads(output.read_text())
        assert saved["total"] == 2
        assert saved["results"][0]["name"] == "Heroes"
        assert saved["results"][0]["tokens"][1] == {"id": 2, "uri": "ipfs://b/2"}
        assert saved["results"][1]["tokens"] == []

    @pytest.mark.asyncio
    async def test_config_error_returns_1(self, tmp_path):
        with patch.object(cli, "setup_logging"), \
                patch.object(cli, "search", AsyncMock()) as mock_search:
            exit_code = await cli.main(["--config", str(tmp_path / "missing.json")])

        assert exit_code == 1
        mock_search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rpc_error_returns_1(self, cli_args, caplog):
        with patch.object(cli, "setup_logging"), \
                patch.object(cli, "search", AsyncMock(side_effect=RpcError("Connection error: refused"))):
            exit_code = await cli.main(cli_args)

        assert exit_code == 1
        assert "Connection error" in caplog.text

    @pytest.mark.asyncio
    async def test_search_wires_client_and_contract(self, cli_args, sample_results):
        config = cli.ConfigManager().validate({
            "rpc_url": "http://localhost:8545",
            "contract_address": cli_args[3],
            "owner": cli_args[5],
            "collections": [cli_args[7], cli_args[9]],
            "limit": 5,
            "timeout": 3,
        })

        with patch.object(cli, "RpcClient") as mock_client_cls, \
                patch.object(cli, "SearchContract") as mock_contract_cls:
            client = mock_client_cls.return_value.__aenter__.return_value
            mock_contract_cls.return_value.find_by_owner = AsyncMock(return_value=sample_results)

            results = await cli.search(config)

        assert results == sample_results
        mock_client_cls.assert_called_once_with("http://localhost:8545", timeout=3.0)
        mock_contract_cls.assert_called_once_with(client, config.contract_address)
        mock_contract_cls.return_value.find_by_owner.assert_awaited_once_with(
            config.collections, config.owner, 5, block="latest"
        )
