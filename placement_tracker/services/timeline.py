from typing import Iterable, List

from placement_tracker.models.application import Application, ApplicationStatus, StageUpdate
from placement_tracker.utils.time import ensure_utc

APPLICATION_SUBMITTED = "Application submitted"


def build_timeline(application: Application) -> List[StageUpdate]:
    """Newest-first history: the implicit "Applied" event plus every stored update."""
    entries = [
        StageUpdate(
            stage="Applied",
            status=ApplicationStatus.APPLIED.value,
            date=ensure_utc(application.applied_date),
            notes=APPLICATION_SUBMITTED,
        )
    ]
    entries.extend(_normalized(application.updates))
    return sorted(entries, key=lambda entry: entry.date, reverse=True)


def _normalized(updates: Iterable[StageUpdate]) -> List[StageUpdate]:
    return [
        StageUpdate(stage=u.stage, status=u.status, date=ensure_utc(u.date), notes=u.notes)
        for u in updates
    ]
