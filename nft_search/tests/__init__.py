"""
nft-search Tests Package

Unit tests run offline:
   pytest nft_search/tests/unit -v

Live scenarios need a node:
   pytest nft_search/tests/test_cases --rpc-url https://porcini.rootnet.app/archive
"""
