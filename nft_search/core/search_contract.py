"""
Search contract caller

Wraps the on-chain search contract's findByOwner view: builds the typed call,
sends it through the RPC client and decodes the nested Result[] return value.
"""
import logging
from typing import List, Sequence

from .client.rpc_client import RpcClient
from .records import FIND_BY_OWNER_OUTPUTS, CollectionResult, collection_results_from_abi
from ..utils.abi_coder import decode_hex_response, encode
from ..utils.abi_types import ADDRESS, Address, FunctionCall, UInt, array_of
from ..utils.common import bytes_to_hex

LOG = logging.getLogger(__name__)


class SearchContract:
    """Read-only access to the collection search contract"""

    FIND_BY_OWNER = "findByOwner"

    def __init__(self, client: RpcClient, contract_address: str):
        """Initialize search contract caller

        Args:
            client: RPC client used for eth_call
            contract_address: Search contract address
        """
        self.client = client
        self.address = Address.from_hex(contract_address).checksum

        LOG.debug(f"SearchContract initialized for {self.address}")

    @classmethod
    def build_call(cls, collections: Sequence[str], owner: str, limit: int) -> FunctionCall:
        """Build findByOwner(address[],address,uint256)"""
        return FunctionCall(cls.FIND_BY_OWNER, (
            array_of(ADDRESS, collections),
            Address.from_hex(owner),
            UInt(limit),
        ))

    async def find_by_owner(self,
                            collections: Sequence[str],
                            owner: str,
                            limit: int,
                            block: str = "latest") -> List[CollectionResult]:
        """Find tokens held by owner across the given ERC-721 collections

        Args:
            collections: ERC-721 contract addresses to search
            owner: Owner address
            limit: Maximum number of tokens the contract should return
            block: Block tag or number for the call

        Returns:
            One CollectionResult per collection reported by the contract

        Raises:
            RpcError: The node rejected the call
            AbiError: Payload could not be encoded or response could not be decoded
        """
        call = self.build_call(collections, owner, limit)
        payload = encode(call)

        LOG.debug(f"Calling {call.signature} on {self.address} with data: {bytes_to_hex(payload)[:50]}...")

        raw = await self.client.call(
            to=self.address,
            data=bytes_to_hex(payload),
            block=block
        )

        decoded = decode_hex_response(raw, FIND_BY_OWNER_OUTPUTS)
        if not decoded:
            LOG.info("No data decoded")
            return []

        results = collection_results_from_abi(decoded[0])
        LOG.info(f"Number of results: {len(results)}")
        for result in results:
            LOG.info(f"Collection: {result.collection_address}")
            LOG.info(f"Name: {result.name}")
            LOG.info(f"Tokens: {len(result.tokens)}")
        return results

    def __str__(self) -> str:
        return f"SearchContract(address={self.address})"

    def __repr__(self) -> str:
        return self.__str__()
