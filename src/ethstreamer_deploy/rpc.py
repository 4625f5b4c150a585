"""JSON-RPC client for ethstreamer-deploy."""

import itertools
import time
from typing import Any, Dict, List, Optional

import requests
from loguru import logger

from .exceptions import RPCError


class JSONRPCClient:
    """Minimal Ethereum JSON-RPC client over HTTP."""

    def __init__(self, url: str, timeout: Optional[float] = None):
        """
        Initialize the client.

        Args:
            url: RPC endpoint URL
            timeout: Per-request HTTP timeout in seconds (None waits forever)
        """
        self.url = url
        self.timeout = timeout
        self._ids = itertools.count(1)
        self._session = requests.Session()

    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Make a single JSON-RPC call.

        Args:
            method: RPC method name, e.g. "eth_accounts"
            params: Positional parameters

        Returns:
            The "result" member of the response

        Raises:
            RPCError: If a network error occurs, the HTTP status is not 200,
                      the body is not a JSON-RPC response object, or the
                      node returns an error
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        logger.debug(f"RPC -> {method} {payload['params']}")

        try:
            response = self._session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise RPCError(f"Network error calling {method} on {self.url}: {e}") from e

        # Check for HTTP errors
        if response.status_code != 200:
            raise RPCError(
                f"RPC request {method} failed with status {response.status_code}"
            )

        try:
            result = response.json()
        except ValueError as e:
            raise RPCError(f"Invalid JSON in response to {method}") from e

        if not isinstance(result, dict):
            raise RPCError(f"Response to {method} is not a JSON-RPC object: {result!r}")

        # Check for RPC errors
        if "error" in result:
            error = result["error"]
            if not isinstance(error, dict):
                raise RPCError(f"RPC error in {method}: {error}")
            raise RPCError(
                f"RPC error in {method}: {error.get('message', error)}",
                code=error.get("code"),
                data=error.get("data"),
            )

        if "result" not in result:
            raise RPCError(f"Response to {method} has neither result nor error")

        return result["result"]

    def chain_id(self) -> int:
        """Return the chain id reported by the node."""
        result = self.call("eth_chainId")
        try:
            return int(result, 16)
        except (TypeError, ValueError) as e:
            raise RPCError(f"Invalid eth_chainId result: {result!r}") from e

    def accounts(self) -> List[str]:
        """Return the node-managed account addresses."""
        return self.call("eth_accounts")

    def send_transaction(self, transaction: Dict[str, Any]) -> str:
        """
        Submit a transaction signed by a node-managed account.

        Returns once the node has accepted the transaction, not once mined.

        Args:
            transaction: Transaction object (from, data, optional to/value/gas)

        Returns:
            Transaction hash
        """
        return self.call("eth_sendTransaction", [transaction])

    def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        """Return the receipt, or None while the transaction is pending."""
        return self.call("eth_getTransactionReceipt", [tx_hash])

    def get_code(self, address: str, block: str = "latest") -> str:
        """Return the runtime bytecode at an address ("0x" if none)."""
        return self.call("eth_getCode", [address, block])

    def wait_for_receipt(
        self,
        tx_hash: str,
        poll_interval: float = 0.5,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Block until a transaction is mined.

        Without a timeout this waits indefinitely on an unresponsive network.

        Args:
            tx_hash: Transaction hash
            poll_interval: Seconds between receipt polls
            timeout: Give up after this many seconds (None waits forever)

        Returns:
            Transaction receipt

        Raises:
            RPCError: If the timeout elapses or a poll fails
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            receipt = self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt

            if deadline is not None and time.monotonic() >= deadline:
                raise RPCError(f"Transaction {tx_hash} not mined after {timeout}s")

            logger.debug(f"Waiting for {tx_hash} to be mined")
            time.sleep(poll_interval)
