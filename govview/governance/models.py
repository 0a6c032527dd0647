"""
Proposal and vote projections of ledger state.

Field names follow the JSON the API serves (camelCase), as the ledger and
the API clients both speak that shape.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel

from govview.lib.errors import LedgerRpcError
from govview.lib.lib import get_amount, get_int, get_number, get_string


class GovernanceProposalStatus(str, Enum):
    VOTING = "Voting"
    REJECTED = "Rejected"
    COMPLETED = "Completed"
    UNKNOWN = "Unknown"


class GovernanceProposalType(str, Enum):
    COMMUNITY_FUND_PROPOSAL = "CommunityFundProposal"
    VOTE_OF_CONFIDENCE = "VoteOfConfidence"


class ProposalVoteResultType(str, Enum):
    YES = "YES"
    NO = "NO"
    NEUTRAL = "NEUTRAL"
    UNKNOWN = "Unknown"


class Proposal(BaseModel):
    proposalId: str
    creationHeight: int
    title: str
    context: str
    contextHash: str
    status: GovernanceProposalStatus
    type: GovernanceProposalType
    amount: Optional[str] = None
    payoutAddress: Optional[str] = None
    currentCycle: int
    totalCycles: int
    cycleEndHeight: int
    proposalEndHeight: int
    votingPeriod: int
    quorum: str
    approvalThreshold: str
    fee: Union[int, float]

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ProposalVote(BaseModel):
    proposalId: str
    masternodeId: str
    cycle: int
    vote: ProposalVoteResultType

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


T = TypeVar("T")


@dataclass
class PageResult(Generic[T]):
    """One page of a query: the items and the token for the following page."""

    items: List[T] = field(default_factory=list)
    next: Optional[str] = None


def proposal_from_ledger(row: Dict[str, Any]) -> Proposal:
    raw_type = get_string(row, "type")
    try:
        proposal_type = GovernanceProposalType(raw_type)
    except ValueError:
        raise LedgerRpcError(None, f"Unrecognized proposal type {raw_type!r}")

    try:
        status = GovernanceProposalStatus(get_string(row, "status"))
    except ValueError:
        status = GovernanceProposalStatus.UNKNOWN

    is_cfp = proposal_type is GovernanceProposalType.COMMUNITY_FUND_PROPOSAL
    return Proposal(
        proposalId=get_string(row, "proposalId") or "",
        creationHeight=get_int(row, "creationHeight"),
        title=get_string(row, "title") or "",
        context=get_string(row, "context") or "",
        contextHash=get_string(row, "contextHash") or "",
        status=status,
        type=proposal_type,
        amount=get_amount(row, "amount") if is_cfp else None,
        payoutAddress=get_string(row, "payoutAddress") if is_cfp else None,
        currentCycle=get_int(row, "currentCycle"),
        totalCycles=get_int(row, "totalCycles") if is_cfp else 1,
        cycleEndHeight=get_int(row, "cycleEndHeight"),
        proposalEndHeight=get_int(row, "proposalEndHeight"),
        votingPeriod=get_int(row, "votingPeriod"),
        quorum=get_string(row, "quorum") or "",
        approvalThreshold=get_string(row, "approvalThreshold") or "",
        fee=get_number(row, "fee") or 0,
    )


def vote_from_ledger(row: Dict[str, Any]) -> ProposalVote:
    try:
        vote = ProposalVoteResultType((get_string(row, "vote") or "").upper())
    except ValueError:
        vote = ProposalVoteResultType.UNKNOWN
    return ProposalVote(
        proposalId=get_string(row, "proposalId") or "",
        masternodeId=get_string(row, "masternodeId") or "",
        cycle=get_int(row, "cycle"),
        vote=vote,
    )
