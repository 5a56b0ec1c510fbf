"""
Shared fixtures for nft-search unit tests.
"""

import pytest
from web3 import Web3

from nft_search.core.records import CollectionResult, TokenRecord


COLLECTION_A = "0xfc3de4990a8ebe9c8debd7c826936eb62ef457b4"
COLLECTION_B = "0xc6851cd880b742163b09377ee4092bcd7e2266b4"
OWNER = "0x81f85e63ce049a6f72f78c4a60b8186e04ebc215"
CONTRACT = "0x130db38980de698796f01873c4a28b3581428422"


@pytest.fixture
def collection_addresses():
    return [COLLECTION_A, COLLECTION_B]


@pytest.fixture
def owner_address():
    return OWNER


@pytest.fixture
def contract_address():
    return CONTRACT


@pytest.fixture
def sample_results():
    """Two collections; token URIs of different lengths so offsets differ"""
    return [
        CollectionResult(
            collection_address=Web3.to_checksum_address(COLLECTION_A),
            name="Heroes",
            tokens=[
                TokenRecord(id=1, uri="ipfs://QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG/1.json"),
                TokenRecord(id=2, uri="ipfs://b/2"),
            ],
        ),
        CollectionResult(
            collection_address=Web3.to_checksum_address(COLLECTION_B),
            name="Empty Collection",
            tokens=[],
        ),
    ]
