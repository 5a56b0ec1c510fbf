"""
Pytest configuration and fixtures for nft-search tests.

Unit tests under nft_search/tests/unit run offline. Tests marked `live` talk
to a real node and are skipped unless --rpc-url is given:

    pytest nft_search/tests --rpc-url https://porcini.rootnet.app/archive
"""

import logging
import sys
from pathlib import Path

# Allow 'import nft_search' without installing the package
_current_dir = Path(__file__).resolve().parent
if str(_current_dir) not in sys.path:
    sys.path.insert(0, str(_current_dir))

import pytest

from nft_search.utils.config_manager import ConfigManager, SearchConfig

LOG = logging.getLogger(__name__)


# Defaults taken from configs/search.json
DEFAULT_CONTRACT = "0x130Db38980De698796F01873C4a28B3581428422"
DEFAULT_OWNER = "0x81f85e63Ce049a6f72f78C4A60b8186e04EbC215"
DEFAULT_COLLECTIONS = [
    "0xfc3De4990a8EBe9C8dEbd7C826936Eb62Ef457B4",
    "0xc6851Cd880B742163B09377Ee4092Bcd7e2266b4",
]


def pytest_addoption(parser):
    """Add custom command line options for pytest."""
    parser.addoption(
        "--rpc-url",
        action="store",
        default=None,
        help="JSON-RPC endpoint for live tests (live tests are skipped without it)"
    )
    parser.addoption(
        "--contract-address",
        action="store",
        default=DEFAULT_CONTRACT,
        help="Search contract address for live tests"
    )
    parser.addoption(
        "--owner",
        action="store",
        default=DEFAULT_OWNER,
        help="Owner address for live tests"
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "live: test needs a reachable JSON-RPC node")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--rpc-url"):
        return
    skip_live = pytest.mark.skip(reason="needs --rpc-url")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture(scope="session")
def live_config(request) -> SearchConfig:
    """SearchConfig built from the command line options"""
    return ConfigManager().validate({
        "rpc_url": request.config.getoption("--rpc-url"),
        "contract_address": request.config.getoption("--contract-address"),
        "owner": request.config.getoption("--owner"),
        "collections": DEFAULT_COLLECTIONS,
        "limit": 100,
    })
