import logging
from typing import List

from govview.governance.models import (
    GovernanceProposalStatus,
    GovernanceProposalType,
    PageResult,
    Proposal,
    proposal_from_ledger,
)
from govview.governance.params import ProposalQuery, ProposalStatusFilter, ProposalTypeFilter
from govview.lib.cursor import decode_cursor, encode_cursor
from govview.lib.errors import LedgerRpcError, MalformedCursor, NotFound
from govview.lib.ledger_rpc import LedgerRpc

logger = logging.getLogger(__name__)

# getgovproposal answers an unknown or malformed id with one of these codes
NOT_FOUND_RPC_CODES = (-5, -8)

_STATUS_MATCH = {
    ProposalStatusFilter.VOTING: GovernanceProposalStatus.VOTING,
    ProposalStatusFilter.REJECTED: GovernanceProposalStatus.REJECTED,
    ProposalStatusFilter.COMPLETED: GovernanceProposalStatus.COMPLETED,
}

_TYPE_MATCH = {
    ProposalTypeFilter.CFP: GovernanceProposalType.COMMUNITY_FUND_PROPOSAL,
    ProposalTypeFilter.VOC: GovernanceProposalType.VOTE_OF_CONFIDENCE,
}


def matches_status(proposal: Proposal, status: ProposalStatusFilter) -> bool:
    return status is ProposalStatusFilter.ALL or proposal.status is _STATUS_MATCH[status]


def matches_type(proposal: Proposal, proposal_type: ProposalTypeFilter) -> bool:
    return proposal_type is ProposalTypeFilter.ALL or proposal.type is _TYPE_MATCH[proposal_type]


def matches_cycle(proposal: Proposal, cycle: int) -> bool:
    """0 is each proposal's own current cycle, so it keeps everything.

    A positive cycle keeps proposals that have that cycle and already reached it.
    """
    if cycle == 0:
        return True
    return cycle <= proposal.totalCycles and cycle <= proposal.currentCycle


class ProposalEngine:
    def __init__(self, ledger: LedgerRpc):
        self._ledger = ledger

    async def get(self, proposal_id: str) -> Proposal:
        try:
            row = await self._ledger.query_gov_proposal(proposal_id)
        except LedgerRpcError as err:
            if err.code in NOT_FOUND_RPC_CODES:
                raise NotFound("Unable to find proposal") from err
            raise
        if not row:
            raise NotFound("Unable to find proposal")
        return proposal_from_ledger(row)

    async def list(self, query: ProposalQuery) -> PageResult[Proposal]:
        rows = await self._ledger.list_gov_proposals()
        proposals = [
            p
            for p in map(proposal_from_ledger, rows)
            if matches_status(p, query.status)
            and matches_type(p, query.type)
            and matches_cycle(p, query.cycle)
        ]
        logger.debug(f"{len(proposals)} of {len(rows)} proposals match {query}")

        start = self._resume_index(proposals, query)
        pagination = query.pagination
        end = len(proposals) if pagination.unbounded else start + pagination.size
        page = proposals[start:end]

        next_token = None
        if page and end < len(proposals):
            next_token = encode_cursor({"q": query.fingerprint(), "p": page[-1].proposalId})
        return PageResult(items=page, next=next_token)

    @staticmethod
    def _resume_index(proposals: List[Proposal], query: ProposalQuery) -> int:
        """Index right after the cursor's proposal; past the end if it cannot be resolved."""
        token = query.pagination.next
        if token is None:
            return 0
        try:
            payload = decode_cursor(token)
        except MalformedCursor as err:
            logger.info(f"Serving empty page for unreadable cursor: {err}")
            return len(proposals)

        if payload["q"] != query.fingerprint():
            logger.info("Serving empty page for cursor minted by a different query")
            return len(proposals)
        for index, proposal in enumerate(proposals):
            if proposal.proposalId == payload["p"]:
                return index + 1
        return len(proposals)
