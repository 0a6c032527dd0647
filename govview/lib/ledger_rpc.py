"""
Ledger RPC port.

LedgerRpc is the read-only surface the query engines depend on. JsonRpcLedger
implements it against a node's JSON-RPC endpoint; tests substitute an
in-memory ledger.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, List, Optional

import httpx

from govview import config
from govview.lib.errors import LedgerRpcError, LedgerUnavailable

logger = logging.getLogger(__name__)


class LedgerRpc(ABC):
    @abstractmethod
    async def query_gov_proposal(self, proposal_id: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def list_gov_proposals(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def list_gov_proposal_votes(self, proposal_id: str) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def list_masternodes(self) -> Dict[str, Dict[str, Any]]:
        ...

    @abstractmethod
    async def get_block_count(self) -> int:
        ...

    async def aclose(self) -> None:
        pass


class JsonRpcLedger(LedgerRpc):
    """JSON-RPC 1.0 client for the ledger node, one httpx.AsyncClient per instance."""

    def __init__(
        self,
        url: str,
        user: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._url = url
        self._auth = (user, password or "") if user else None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._ids = itertools.count(1)

    @classmethod
    def from_config(cls) -> "JsonRpcLedger":
        return cls(
            config.RPC_URL,
            user=config.RPC_USER,
            password=config.RPC_PASSWORD,
            timeout=config.RPC_TIMEOUT,
        )

    async def call(self, method: str, *params: Any) -> Any:
        payload = {
            "jsonrpc": "1.0",
            "id": next(self._ids),
            "method": method,
            "params": list(params),
        }
        try:
            resp = await self._client.post(self._url, json=payload, auth=self._auth)
        except httpx.RequestError as err:
            logger.error(f"Ledger RPC {method} failed: {err}")
            raise LedgerUnavailable(f"Ledger RPC request failed: {err}") from err

        # Nodes answer RPC errors with HTTP 500 and a JSON body, so the
        # status code alone says nothing; only a non-JSON body is fatal.
        try:
            body = resp.json(parse_float=Decimal)
        except ValueError as err:
            logger.error(f"Ledger RPC {method} returned {resp.status_code}: {resp.text[:200]}")
            raise LedgerUnavailable(
                f"Ledger RPC returned an unreadable response ({resp.status_code})"
            ) from err

        error = body.get("error") if isinstance(body, dict) else None
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            logger.warning(f"Ledger RPC {method} error {code}: {message}")
            raise LedgerRpcError(code, message)

        return body.get("result") if isinstance(body, dict) else None

    async def query_gov_proposal(self, proposal_id: str) -> Dict[str, Any]:
        return await self.call("getgovproposal", proposal_id)

    async def list_gov_proposals(self) -> List[Dict[str, Any]]:
        # limit 0 asks the node for every proposal in its native order
        result = await self.call(
            "listgovproposals",
            {"type": "all", "status": "all", "cycle": 0, "pagination": {"limit": 0}},
        )
        return result or []

    async def list_gov_proposal_votes(self, proposal_id: str) -> List[Dict[str, Any]]:
        result = await self.call(
            "listgovproposalvotes",
            {
                "proposalId": proposal_id,
                "masternode": "all",
                "cycle": -1,
                "pagination": {"limit": 0},
            },
        )
        return result or []

    async def list_masternodes(self) -> Dict[str, Dict[str, Any]]:
        result = await self.call("listmasternodes", {"limit": 1000000}, True)
        return result or {}

    async def get_block_count(self) -> int:
        return int(await self.call("getblockcount"))

    async def aclose(self) -> None:
        await self._client.aclose()
