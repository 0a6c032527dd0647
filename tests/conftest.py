"""
Shared fixtures for governance tests.

Provides an in-memory ledger that records every RPC call, a small governance
scenario modelled on a regtest chain, plus an HTTPX AsyncClient wired to the
FastAPI app with the ledger swapped in.
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from govview.lib.errors import LedgerRpcError
from govview.lib.ledger_rpc import LedgerRpc


# ---------------------------------------------------------------------------
# Fake ledger
# ---------------------------------------------------------------------------

class FakeLedger(LedgerRpc):
    """Answers like a node's governance RPCs, from plain rows."""

    def __init__(self, proposals=None, votes=None, masternodes=None, height=300):
        self.proposals = list(proposals or [])
        self.votes = dict(votes or {})
        self.masternodes = dict(masternodes or {})
        self.height = height
        self.calls = []  # log of (method, args) for assertions

    async def query_gov_proposal(self, proposal_id):
        self.calls.append(("query_gov_proposal", proposal_id))
        for row in self.proposals:
            if row["proposalId"] == proposal_id:
                return dict(row)
        if len(proposal_id) != 64:
            raise LedgerRpcError(
                -8,
                f"proposalId must be of length 64 (not {len(proposal_id)}, for '{proposal_id}')",
            )
        raise LedgerRpcError(-8, f"Proposal <{proposal_id}> does not exist")

    async def list_gov_proposals(self):
        self.calls.append(("list_gov_proposals", ()))
        return [dict(row) for row in self.proposals]

    async def list_gov_proposal_votes(self, proposal_id):
        self.calls.append(("list_gov_proposal_votes", proposal_id))
        return [dict(row) for row in self.votes.get(proposal_id, [])]

    async def list_masternodes(self):
        self.calls.append(("list_masternodes", ()))
        return {k: dict(v) for k, v in self.masternodes.items()}

    async def get_block_count(self):
        self.calls.append(("get_block_count", ()))
        return self.height


# ---------------------------------------------------------------------------
# Scenario
# ---------------------------------------------------------------------------

CFP_ID = "a1" * 32
VOC_ID = "b2" * 32
OLD_CFP_ID = "c3" * 32
DONE_VOC_ID = "d4" * 32
UNKNOWN_ID = "ef" * 32

MN = [f"{i:064x}" for i in range(4)]
PAYOUT_ADDRESS = "bcrt1qpayoutaddress0000000000000000000000"


def make_proposal_row(
    proposal_id,
    type="CommunityFundProposal",
    status="Voting",
    current_cycle=1,
    total_cycles=2,
    creation_height=103,
    title="CFP proposal",
):
    is_cfp = type == "CommunityFundProposal"
    return {
        "proposalId": proposal_id,
        "creationHeight": creation_height,
        "title": title,
        "context": "github",
        "contextHash": "",
        "status": status,
        "type": type,
        # nodes report zero/empty payout fields on VOCs
        "amount": Decimal("1.23") if is_cfp else Decimal("0"),
        "payoutAddress": PAYOUT_ADDRESS if is_cfp else "",
        "currentCycle": current_cycle,
        "totalCycles": total_cycles,
        "cycleEndHeight": 210,
        "proposalEndHeight": 280 if is_cfp else 210,
        "votingPeriod": 70,
        "quorum": "1.00%",
        "approvalThreshold": "50.00%" if is_cfp else "66.67%",
        "fee": Decimal("10") if is_cfp else Decimal("5"),
    }


def make_vote_row(proposal_id, masternode_id, cycle, vote):
    return {
        "proposalId": proposal_id,
        "masternodeId": masternode_id,
        "cycle": cycle,
        "vote": vote,
    }


def make_scenario():
    """Four proposals in creation order; three of four masternodes are ours.

    CFP_ID is in its second cycle: MN0 voted in cycle 1, then MN0-MN2 voted
    in cycle 2 (MN1 changed its mind from YES to NO).
    """
    proposals = [
        make_proposal_row(CFP_ID, current_cycle=2, total_cycles=2),
        make_proposal_row(VOC_ID, type="VoteOfConfidence", total_cycles=1, title="VOC proposal"),
        make_proposal_row(OLD_CFP_ID, status="Rejected", total_cycles=3, title="Old CFP"),
        make_proposal_row(
            DONE_VOC_ID, type="VoteOfConfidence", status="Completed", total_cycles=1, title="Done VOC"
        ),
    ]
    votes = {
        CFP_ID: [
            make_vote_row(CFP_ID, MN[0], 1, "YES"),
            make_vote_row(CFP_ID, MN[0], 2, "YES"),
            make_vote_row(CFP_ID, MN[1], 2, "YES"),
            make_vote_row(CFP_ID, MN[2], 2, "NEUTRAL"),
            make_vote_row(CFP_ID, MN[1], 2, "NO"),
        ],
        OLD_CFP_ID: [
            make_vote_row(OLD_CFP_ID, MN[0], 1, "YES"),
            make_vote_row(OLD_CFP_ID, MN[3], 1, "NO"),
        ],
    }
    masternodes = {
        MN[0]: {"operatorIsMine": True, "ownerIsMine": True, "mintedBlocks": 12},
        MN[1]: {"operatorIsMine": True, "ownerIsMine": False, "mintedBlocks": 3},
        MN[2]: {"operatorIsMine": False, "ownerIsMine": True, "mintedBlocks": 1},
        MN[3]: {"operatorIsMine": False, "ownerIsMine": False, "mintedBlocks": 40},
    }
    return proposals, votes, masternodes


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def ledger():
    proposals, votes, masternodes = make_scenario()
    return FakeLedger(proposals, votes, masternodes)


@pytest.fixture
def empty_ledger():
    return FakeLedger()


@pytest_asyncio.fixture
async def client(ledger):
    """HTTPX async client talking to the FastAPI app with the ledger faked."""
    from govview.lib.fastapi import get_ledger, limiter
    from govview.main import app

    app.dependency_overrides[get_ledger] = lambda: ledger

    # Disable rate limiting in tests
    limiter.enabled = False

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    limiter.enabled = True
    app.dependency_overrides.pop(get_ledger, None)
