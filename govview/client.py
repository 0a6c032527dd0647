"""
Async client for the governance API.

Listing calls return ApiPagedList pages: iterate them like a list and pass
page.next_token back as `next` to continue. Error envelopes from the server
are raised as ApiException.
"""

import logging
from typing import Any, List, Optional, Tuple

import httpx

from govview.governance.envelope import ApiPagedList
from govview.governance.models import Proposal, ProposalVote

logger = logging.getLogger(__name__)


class ApiException(Exception):
    def __init__(self, code: int, type: str, at: Optional[int], message: str, url: Optional[str]):
        super().__init__(f"{code} - {type} ({url}): {message}")
        self.code = code
        self.type = type
        self.at = at
        self.message = message
        self.url = url


def _flag(value: bool) -> str:
    return "true" if value else "false"


class GovernanceClient:
    def __init__(
        self,
        url: str,
        network: str = "regtest",
        version: str = "v0.0",
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._prefix = f"/{version}/{network}"
        self._client = client or httpx.AsyncClient(base_url=url, timeout=timeout)

    async def __aenter__(self) -> "GovernanceClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: Optional[List[Tuple[str, str]]] = None) -> Any:
        resp = await self._client.get(f"{self._prefix}{path}", params=params)
        try:
            body = resp.json()
        except ValueError as err:
            raise ApiException(
                resp.status_code, "UnknownError", None, resp.text, str(resp.request.url)
            ) from err

        if resp.status_code != 200:
            logger.debug(f"Governance API error {resp.status_code}: {body}")
            raise ApiException(
                body.get("code", resp.status_code),
                body.get("type", "UnknownError"),
                body.get("at"),
                body.get("message", resp.text),
                body.get("url"),
            )
        return body

    async def list_gov_proposals(
        self,
        status: str = "all",
        type: str = "all",
        cycle: int = 0,
        all: bool = False,
        size: int = 30,
        next: Optional[str] = None,
    ) -> ApiPagedList[Proposal]:
        params = [
            ("size", str(size)),
            ("status", status),
            ("type", type),
            ("cycle", str(cycle)),
            ("all", _flag(all)),
        ]
        if next is not None:
            params.append(("next", next))
        body = await self._get("/governance/proposals", params)
        return ApiPagedList(
            [Proposal.model_validate(p) for p in body.get("data", [])],
            (body.get("page") or {}).get("next"),
        )

    async def get_gov_proposal(self, id: str) -> Proposal:
        body = await self._get(f"/governance/proposals/{id}")
        return Proposal.model_validate(body["data"])

    async def list_gov_proposal_votes(
        self,
        id: str,
        masternode: str = "mine",
        cycle: int = 0,
        all: bool = False,
        size: int = 30,
        next: Optional[str] = None,
    ) -> ApiPagedList[ProposalVote]:
        params = [
            ("size", str(size)),
            ("masternode", masternode),
            ("cycle", str(cycle)),
            ("all", _flag(all)),
        ]
        if next is not None:
            params.append(("next", next))
        body = await self._get(f"/governance/proposals/{id}/votes", params)
        return ApiPagedList(
            [ProposalVote.model_validate(v) for v in body.get("data", [])],
            (body.get("page") or {}).get("next"),
        )
