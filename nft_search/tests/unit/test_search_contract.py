"""
Unit tests for SearchContract with a mocked RPC client
"""

import logging
from unittest.mock import AsyncMock, Mock

import pytest
from web3 import Web3

from nft_search.core.records import COLLECTION_RESULT_TYPE
from nft_search.core.search_contract import SearchContract
from nft_search.utils.abi_coder import encode, encode_arguments
from nft_search.utils.abi_types import DynamicArray
from nft_search.utils.common import bytes_to_hex
from nft_search.utils.exceptions import RpcError, TruncatedData


def encode_results(results) -> str:
    value = DynamicArray(COLLECTION_RESULT_TYPE, tuple(r.to_abi() for r in results))
    return bytes_to_hex(encode_arguments([value]))


@pytest.fixture
def mock_client():
    client = Mock()
    client.call = AsyncMock(return_value="0x")
    return client


class TestSearchContract:
    """Test findByOwner against canned eth_call responses"""

    def test_address_is_checksummed(self, mock_client, contract_address):
        contract = SearchContract(mock_client, contract_address)
        assert contract.address == Web3.to_checksum_address(contract_address)
        assert str(contract) == f"SearchContract(address={contract.address})"

    def test_invalid_contract_address(self, mock_client):
        with pytest.raises(ValueError):
            SearchContract(mock_client, "0xnot-an-address")

    @pytest.mark.asyncio
    async def test_sends_encoded_call(self, mock_client, contract_address,
                                      collection_addresses, owner_address):
        contract = SearchContract(mock_client, contract_address)
        await contract.find_by_owner(collection_addresses, owner_address, 100)

        expected = encode(SearchContract.build_call(collection_addresses, owner_address, 100))
        mock_client.call.assert_awaited_once_with(
            to=contract.address,
            data=bytes_to_hex(expected),
            block="latest"
        )

    @pytest.mark.asyncio
    async def test_block_is_forwarded(self, mock_client, contract_address,
                                      collection_addresses, owner_address):
        contract = SearchContract(mock_client, contract_address)
        await contract.find_by_owner(collection_addresses, owner_address, 5, block="0x10")

        assert mock_client.call.await_args.kwargs["block"] == "0x10"

    @pytest.mark.asyncio
    async def test_decodes_results(self, mock_client, contract_address,
                                   collection_addresses, owner_address, sample_results):
        mock_client.call.return_value = encode_results(sample_results)
        contract = SearchContract(mock_client, contract_address)

        results = await contract.find_by_owner(collection_addresses, owner_address, 100)

        assert results == sample_results
        assert results[0].tokens[0].id == 1
        assert results[1].tokens == []

    @pytest.mark.asyncio
    async def test_empty_response_returns_empty_list(self, mock_client, contract_address,
                                                     collection_addresses, owner_address, caplog):
        contract = SearchContract(mock_client, contract_address)

        with caplog.at_level(logging.INFO):
            results = await contract.find_by_owner(collection_addresses, owner_address, 100)

        assert results == []
        assert "No data decoded" in caplog.text

    @pytest.mark.asyncio
    async def test_rpc_error_propagates(self, mock_client, contract_address,
                                        collection_addresses, owner_address):
        mock_client.call.side_effect = RpcError("Contract call failed: execution reverted", rpc_code=3)
        contract = SearchContract(mock_client, contract_address)

        with pytest.raises(RpcError) as exc_info:
            await contract.find_by_owner(collection_addresses, owner_address, 100)
        assert exc_info.value.rpc_code == 3

    @pytest.mark.asyncio
    async def test_truncated_response_propagates(self, mock_client, contract_address,
                                                 collection_addresses, owner_address,
                                                 sample_results):
        mock_client.call.return_value = encode_results(sample_results)[:-64]
        contract = SearchContract(mock_client, contract_address)

        with pytest.raises(TruncatedData):
            await contract.find_by_owner(collection_addresses, owner_address, 100)

    @pytest.mark.asyncio
    async def test_invalid_owner_is_not_sent(self, mock_client, contract_address,
                                             collection_addresses):
        contract = SearchContract(mock_client, contract_address)

        with pytest.raises(ValueError):
            await contract.find_by_owner(collection_addresses, "0x1234", 100)
        mock_client.call.assert_not_awaited()
