import math
from typing import NamedTuple, Sequence

APPLIED_STAGE = "Applied"
PROCESS_COMPLETE = "Process Complete"


class StageInfo(NamedTuple):
    current_stage: str
    next_step: str
    progress: int


def compute_stage(index: int, stages: Sequence[str]) -> StageInfo:
    """Map a stage pointer onto a drive's process list.

    An index outside the list yields the "Applied" label, and the step after
    the last stage is "Process Complete". Progress is the share of stages
    reached, rounded half up, and is 0 for an empty process.
    """
    stages = list(stages or [])
    total = len(stages)

    current_stage = stages[index] if 0 <= index < total else APPLIED_STAGE
    next_step = stages[index + 1] if 0 <= index + 1 < total else PROCESS_COMPLETE

    progress = 0
    if total:
        progress = int(math.floor((index + 1) / total * 100 + 0.5))

    return StageInfo(current_stage=current_stage, next_step=next_step, progress=progress)


def locate_stage(current_stage: str, stages: Sequence[str]) -> int:
    """Index of the first stage equal to current_stage, or 0 when it is not in the list."""
    for index, stage in enumerate(stages or []):
        if stage == current_stage:
            return index
    return 0
