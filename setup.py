from setuptools import setup, find_packages

setup(
    name="nft-search",
    version="0.1.0",
    description="ABI codec and client for the ERC-721 collection search contract",
    packages=find_packages(),
    install_requires=[
        "web3>=6.0.0",
        "eth-utils>=2.0.0",
        "aiohttp>=3.8.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "eth-abi>=4.0.0",
        ],
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "nft-search=nft_search.main:run",
        ],
    },
)
