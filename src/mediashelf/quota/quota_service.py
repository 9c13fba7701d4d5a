"""Quota aggregator: used/total/percentage over a user's active assets."""

from __future__ import annotations

from dataclasses import dataclass

from ..assets.assets_models import ACTIVE
from ..db.unit_of_work import UnitOfWorkFactory


@dataclass(slots=True, frozen=True)
class QuotaSnapshot:
    used: int
    total: int
    percentage: float

    def as_dict(self) -> dict[str, float | int]:
        return {"used": self.used, "total": self.total, "percentage": self.percentage}


def build_snapshot(used: int, total: int) -> QuotaSnapshot:
    percentage = (used * 100.0) / total if total > 0 else 0.0
    return QuotaSnapshot(used=used, total=total, percentage=percentage)


@dataclass(slots=True)
class QuotaAggregator:
    """Trashed assets no longer count against the ceiling."""

    uow_factory: UnitOfWorkFactory
    total_bytes: int

    def snapshot(self, user_id: str) -> QuotaSnapshot:
        with self.uow_factory() as uow:
            used = uow.assets.sum_size(user_id, ACTIVE)
        return build_snapshot(used, self.total_bytes)


__all__ = ["QuotaAggregator", "QuotaSnapshot", "build_snapshot"]
