"""
/governance endpoints

Read-only listing of on-chain governance proposals and their masternode votes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from govview import config
from govview.governance.envelope import paged_response, single_response
from govview.governance.params import parse_proposal_query, parse_vote_query
from govview.governance.proposals import ProposalEngine
from govview.governance.votes import VoteEngine
from govview.lib.errors import NotFound
from govview.lib.fastapi import get_ledger, limiter
from govview.lib.ledger_rpc import LedgerRpc

router = APIRouter(prefix="/governance", tags=["governance"])


def verify_network(network: str):
    """Guard for the /{version}/{network} mounts: only the configured network is served."""
    if network != config.NETWORK:
        raise NotFound("Not Found")


# -----------------------------------------------------------------------------
# proposals
# -----------------------------------------------------------------------------


@router.get("/proposals")
@limiter.limit(config.RATE_LIMIT)
async def list_proposals(
    request: Request,
    status: Optional[str] = Query(None),
    proposal_type: Optional[str] = Query(None, alias="type"),
    cycle: Optional[str] = Query(None),
    fetch_all: Optional[str] = Query(None, alias="all"),
    size: Optional[str] = Query(None),
    next_token: Optional[str] = Query(None, alias="next"),
    ledger: LedgerRpc = Depends(get_ledger),
):
    """List proposals filtered by status, type and cycle."""
    query = parse_proposal_query(
        status=status,
        type=proposal_type,
        cycle=cycle,
        all=fetch_all,
        size=size,
        next=next_token,
    )
    result = await ProposalEngine(ledger).list(query)
    return paged_response(result)


@router.get("/proposals/{proposal_id}")
@limiter.limit(config.RATE_LIMIT)
async def get_proposal(
    request: Request,
    proposal_id: str,
    ledger: LedgerRpc = Depends(get_ledger),
):
    proposal = await ProposalEngine(ledger).get(proposal_id)
    return single_response(proposal)


# -----------------------------------------------------------------------------
# votes
# -----------------------------------------------------------------------------


@router.get("/proposals/{proposal_id}/votes")
@limiter.limit(config.RATE_LIMIT)
async def list_proposal_votes(
    request: Request,
    proposal_id: str,
    masternode: Optional[str] = Query(None),
    cycle: Optional[str] = Query(None),
    fetch_all: Optional[str] = Query(None, alias="all"),
    size: Optional[str] = Query(None),
    next_token: Optional[str] = Query(None, alias="next"),
    ledger: LedgerRpc = Depends(get_ledger),
):
    """List votes on a proposal for the current cycle (0), all cycles (-1) or one cycle."""
    query = parse_vote_query(
        proposal_id,
        masternode=masternode,
        cycle=cycle,
        all=fetch_all,
        size=size,
        next=next_token,
    )
    result = await VoteEngine(ledger).list(query)
    return paged_response(result)
