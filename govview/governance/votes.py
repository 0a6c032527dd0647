"""
Per-proposal vote listing.

Votes are flattened in ledger order, narrowed to the requested cycles and
masternode scope, deduplicated so each masternode shows one vote per cycle,
then paginated by position in that list. Cursors carry the index of the last
vote handed out.
"""

import logging
from typing import Dict, Iterable, List, Set, Tuple

from govview.governance.models import PageResult, Proposal, ProposalVote, vote_from_ledger
from govview.governance.params import MasternodeScope, VoteQuery
from govview.governance.proposals import ProposalEngine
from govview.lib.cursor import decode_cursor, encode_cursor
from govview.lib.errors import MalformedCursor
from govview.lib.ledger_rpc import LedgerRpc

logger = logging.getLogger(__name__)

ALL_CYCLES = -1
CURRENT_CYCLE = 0


def resolve_cycles(proposal: Proposal, cycle: int) -> Set[int]:
    if cycle == CURRENT_CYCLE:
        return {proposal.currentCycle}
    if cycle == ALL_CYCLES:
        return set(range(1, proposal.currentCycle + 1))
    return {cycle}


def latest_per_cycle(votes: Iterable[ProposalVote]) -> List[ProposalVote]:
    """Keep one vote per (masternode, cycle).

    A re-vote replaces the earlier one in place, so positions already handed
    out by a cursor do not move.
    """
    surfaced: List[ProposalVote] = []
    slots: Dict[Tuple[str, int], int] = {}
    for vote in votes:
        key = (vote.masternodeId, vote.cycle)
        if key in slots:
            surfaced[slots[key]] = vote
        else:
            slots[key] = len(surfaced)
            surfaced.append(vote)
    return surfaced


class VoteEngine:
    def __init__(self, ledger: LedgerRpc):
        self._ledger = ledger
        self._proposals = ProposalEngine(ledger)

    async def list(self, query: VoteQuery) -> PageResult[ProposalVote]:
        proposal = await self._proposals.get(query.proposal_id)
        cycles = resolve_cycles(proposal, query.cycle)

        rows = await self._ledger.list_gov_proposal_votes(proposal.proposalId)
        votes = latest_per_cycle(v for v in map(vote_from_ledger, rows) if v.cycle in cycles)
        if query.masternode is MasternodeScope.MINE:
            mine = await self._mine_masternode_ids()
            votes = [v for v in votes if v.masternodeId in mine]
        logger.debug(f"{len(votes)} votes on {proposal.proposalId} match {query}")

        start = self._resume_index(votes, query)
        pagination = query.pagination
        end = len(votes) if pagination.unbounded else start + pagination.size
        page = votes[start:end]

        next_token = None
        if page and end < len(votes):
            next_token = encode_cursor({"q": query.fingerprint(), "p": end - 1})
        return PageResult(items=page, next=next_token)

    async def _mine_masternode_ids(self) -> Set[str]:
        masternodes = await self._ledger.list_masternodes()
        return {
            mn_id
            for mn_id, info in masternodes.items()
            if info.get("operatorIsMine") or info.get("ownerIsMine")
        }

    @staticmethod
    def _resume_index(votes: List[ProposalVote], query: VoteQuery) -> int:
        token = query.pagination.next
        if token is None:
            return 0
        try:
            payload = decode_cursor(token)
        except MalformedCursor as err:
            logger.info(f"Serving empty page for unreadable cursor: {err}")
            return len(votes)

        position = payload["p"]
        if payload["q"] != query.fingerprint() or not isinstance(position, int) or position < 0:
            logger.info("Serving empty page for cursor minted by a different query")
            return len(votes)
        return min(position + 1, len(votes))
