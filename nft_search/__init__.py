"""
nft-search: ABI codec and client for the ERC-721 collection search contract
"""
from .core.records import CollectionResult, TokenRecord
from .core.search_contract import SearchContract
from .utils.abi_coder import decode, decode_arguments, decode_hex_response, encode, function_selector

__version__ = "0.1.0"
