from typing import FrozenSet
from pydantic import BaseModel, ConfigDict, computed_field


class SeatSet(BaseModel):
    """Distinct users holding a billable seat in an organization. Never stored."""

    model_config = ConfigDict(frozen=True)

    org_id: int
    member_ids: FrozenSet[int] = frozenset()

    @computed_field
    @property
    def count(self) -> int:
        return len(self.member_ids)
