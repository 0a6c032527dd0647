"""
Query parameter validation.

Raw request values (strings from the query string, or plain Python values
when called directly) are validated by frozen pydantic models. A pydantic
ValidationError is turned into InvalidParameter before any ledger call is
made.
"""

from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from govview import config
from govview.lib.cursor import is_well_formed, query_fingerprint
from govview.lib.errors import InvalidParameter


class ProposalStatusFilter(str, Enum):
    VOTING = "voting"
    REJECTED = "rejected"
    COMPLETED = "completed"
    ALL = "all"


class ProposalTypeFilter(str, Enum):
    CFP = "cfp"
    VOC = "voc"
    ALL = "all"


class MasternodeScope(str, Enum):
    MINE = "mine"
    ALL = "all"


CHOICES: Dict[str, Type[Enum]] = {
    "status": ProposalStatusFilter,
    "type": ProposalTypeFilter,
    "masternode": MasternodeScope,
}


class Pagination(BaseModel):
    model_config = ConfigDict(frozen=True)

    size: int = Field(ge=0)
    next: Optional[str] = None

    @property
    def unbounded(self) -> bool:
        return self.size == 0


class _ListQuery(BaseModel):
    """Fields shared by every listing: page size, the all flag and the cursor."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    MIN_CYCLE: ClassVar[int] = 0

    cycle: int = 0
    size: int = Field(default_factory=lambda: config.DEFAULT_PAGE_SIZE, ge=0)
    fetch_all: bool = Field(default=False, alias="all")
    next: Optional[str] = None

    @field_validator("cycle", "size", mode="before")
    @classmethod
    def _no_booleans(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("boolean is not an integer")
        return v

    @field_validator("cycle")
    @classmethod
    def _cycle_floor(cls, v: int) -> int:
        if v < cls.MIN_CYCLE:
            raise ValueError(f"cycle below {cls.MIN_CYCLE}")
        return v

    @field_validator("size")
    @classmethod
    def _size_ceiling(cls, v: int) -> int:
        if v > config.MAX_PAGE_SIZE:
            raise ValueError(f"size above {config.MAX_PAGE_SIZE}")
        return v

    @field_validator("next")
    @classmethod
    def _token_shape(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_well_formed(v):
            raise ValueError("malformed token")
        return v

    @property
    def pagination(self) -> Pagination:
        return Pagination(size=0 if self.fetch_all else self.size, next=self.next)


class ProposalQuery(_ListQuery):
    status: ProposalStatusFilter = ProposalStatusFilter.ALL
    type: ProposalTypeFilter = ProposalTypeFilter.ALL

    def fingerprint(self) -> str:
        return query_fingerprint(
            "proposals", status=self.status.value, type=self.type.value, cycle=self.cycle
        )


class VoteQuery(_ListQuery):
    # -1 selects every cycle up to the current one
    MIN_CYCLE: ClassVar[int] = -1

    proposal_id: str
    masternode: MasternodeScope = MasternodeScope.MINE

    def fingerprint(self) -> str:
        return query_fingerprint(
            "votes",
            proposal_id=self.proposal_id,
            masternode=self.masternode.value,
            cycle=self.cycle,
        )


def invalid_parameter(errors: Sequence[Dict[str, Any]], min_cycle: int = 0) -> InvalidParameter:
    """First validation error as the API's InvalidParameter.

    Accepts pydantic's error list, with or without FastAPI's leading
    "query"/"path" location.
    """
    loc = [str(part) for part in errors[0].get("loc", ())] if errors else []
    if loc and loc[0] in ("query", "path"):
        loc = loc[1:]
    field = loc[0] if loc else "query"

    if field in CHOICES:
        return InvalidParameter(field, [m.value for m in CHOICES[field]])
    if field == "all":
        return InvalidParameter(field, ["true", "false"])
    if field == "size":
        return InvalidParameter(field, reason=f"Must be an integer between 0 and {config.MAX_PAGE_SIZE}")
    if field == "cycle":
        return InvalidParameter(field, reason=f"Must be an integer at least {min_cycle}")
    if field == "next":
        return InvalidParameter(field, reason="Must be a pagination token returned by a previous page")
    return InvalidParameter(field, reason=errors[0].get("msg", "") if errors else "")


Q = TypeVar("Q", bound=_ListQuery)


def _validate(model: Type[Q], **values: Any) -> Q:
    try:
        return model.model_validate({k: v for k, v in values.items() if v is not None})
    except ValidationError as err:
        raise invalid_parameter(err.errors(include_url=False), model.MIN_CYCLE) from None


def parse_proposal_query(
    status: Any = None,
    type: Any = None,
    cycle: Any = None,
    all: Any = None,
    size: Any = None,
    next: Any = None,
) -> ProposalQuery:
    return _validate(ProposalQuery, status=status, type=type, cycle=cycle, all=all, size=size, next=next)


def parse_vote_query(
    proposal_id: str,
    masternode: Any = None,
    cycle: Any = None,
    all: Any = None,
    size: Any = None,
    next: Any = None,
) -> VoteQuery:
    """Validate a vote listing. cycle -1 means every cycle up to the current one."""
    return _validate(
        VoteQuery,
        proposal_id=proposal_id,
        masternode=masternode,
        cycle=cycle,
        all=all,
        size=size,
        next=next,
    )
