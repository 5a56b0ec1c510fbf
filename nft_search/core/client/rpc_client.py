"""
Minimal async JSON-RPC client

Only what the search needs: one session per `async with` block and
eth_call against a contract. Every failure surfaces as RpcError; nothing is
retried.
"""
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp
from web3 import Web3

from ...utils.exceptions import RpcError

LOG = logging.getLogger(__name__)


def checksum(address: str) -> str:
    """EIP-55 form of a hex address; the 0x prefix is optional"""
    if not address.lower().startswith("0x"):
        address = "0x" + address
    return Web3.to_checksum_address(address)


def unwrap_response(body: Any, method: str) -> Any:
    """Return the result member of a JSON-RPC response or raise RpcError"""
    if not isinstance(body, dict):
        raise RpcError(f"Malformed JSON-RPC response: {body!r}", method=method)

    error = body.get("error")
    if error is not None:
        if isinstance(error, dict):
            raise RpcError(
                f"Contract call failed: {error.get('message', error)}",
                rpc_code=error.get("code"),
                method=method
            )
        raise RpcError(f"Contract call failed: {error}", method=method)

    if "result" not in body:
        raise RpcError(f"Response has no result: {body}", method=method)
    return body["result"]


class RpcClient:
    """JSON-RPC client for read-only contract calls

    Usage:
        async with RpcClient(rpc_url, timeout=10) as client:
            raw = await client.call(to=contract, data=payload_hex)
    """

    def __init__(self, rpc_url: str, timeout: float = 30.0):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None
        self._last_id = 0

    async def __aenter__(self) -> "RpcClient":
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()
            self.session = None

    def _envelope(self, method: str, params: List[Any]) -> Dict[str, Any]:
        self._last_id += 1
        return {"jsonrpc": "2.0", "id": self._last_id, "method": method, "params": params}

    async def send_request(self, method: str, params: List[Any] = None) -> Any:
        """POST a single JSON-RPC request and return its result

        Raises:
            RuntimeError: Used outside `async with`
            RpcError: Transport failure, non-200 status, invalid JSON or an
                error object in the response
        """
        if self.session is None:
            raise RuntimeError("Client not initialized. Use async with statement.")

        request = self._envelope(method, params or [])
        LOG.debug(f"-> {method} (id={request['id']}) to {self.rpc_url}")

        try:
            async with self.session.post(self.rpc_url, json=request) as response:
                if response.status != 200:
                    raise RpcError(
                        f"HTTP {response.status} from {self.rpc_url}: {await response.text()}",
                        rpc_code=response.status,
                        method=method
                    )
                # Some nodes answer with text/plain
                body = await response.json(content_type=None)
        except asyncio.TimeoutError:
            raise RpcError(f"{method} timed out after {self.timeout}s", method=method)
        except aiohttp.ClientError as e:
            raise RpcError(f"Connection error: {e}", method=method)
        except json.JSONDecodeError as e:
            raise RpcError(f"Invalid JSON response: {e}", method=method)

        return unwrap_response(body, method)

    async def call(self,
                   to: str,
                   data: str = "0x",
                   from_: str = None,
                   block: str = "latest") -> str:
        """eth_call against `to`; returns the raw hex result"""
        tx: Dict[str, str] = {"to": checksum(to), "data": data}
        if from_:
            tx["from"] = checksum(from_)

        result = await self.send_request("eth_call", [tx, block])
        if not isinstance(result, str):
            raise RpcError(f"Unexpected eth_call result: {result!r}", method="eth_call")
        LOG.debug(f"<- eth_call returned {len(result)} hex chars")
        return result
