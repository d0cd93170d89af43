"""
Unit tests for stage pointer to label mapping.
"""

from placement_tracker.services.stage_calculator import (
    APPLIED_STAGE,
    PROCESS_COMPLETE,
    compute_stage,
    locate_stage,
)

PROCESS = ["Online Test", "Technical Interview", "HR Interview"]


class TestComputeStage:
    """Labels and progress for a stage pointer."""

    def test_first_stage(self):
        stage = compute_stage(0, PROCESS)

        assert stage.current_stage == "Online Test"
        assert stage.next_step == "Technical Interview"
        assert stage.progress == 33

    def test_middle_stage_rounds_half_up(self):
        assert compute_stage(1, PROCESS).progress == 67

    def test_last_stage_completes_process(self):
        stage = compute_stage(2, PROCESS)

        assert stage.current_stage == "HR Interview"
        assert stage.next_step == PROCESS_COMPLETE
        assert stage.progress == 100

    def test_single_stage_process(self):
        stage = compute_stage(0, ["Interview"])

        assert stage.current_stage == "Interview"
        assert stage.next_step == PROCESS_COMPLETE
        assert stage.progress == 100

    def test_empty_process(self):
        stage = compute_stage(0, [])

        assert stage.current_stage == APPLIED_STAGE
        assert stage.next_step == PROCESS_COMPLETE
        assert stage.progress == 0

    def test_out_of_range_index_falls_back_to_applied(self):
        stage = compute_stage(5, PROCESS)

        assert stage.current_stage == APPLIED_STAGE
        assert stage.next_step == PROCESS_COMPLETE

    def test_exact_half_rounds_up(self):
        """1 of 8 stages is 12.5%."""
        assert compute_stage(0, ["s"] * 8).progress == 13


class TestLocateStage:

    def test_finds_stage(self):
        assert locate_stage("HR Interview", PROCESS) == 2

    def test_first_match_wins(self):
        assert locate_stage("Interview", ["Interview", "Test", "Interview"]) == 0

    def test_unknown_stage_maps_to_zero(self):
        assert locate_stage("Group Discussion", PROCESS) == 0

    def test_empty_process(self):
        assert locate_stage("Applied", []) == 0
