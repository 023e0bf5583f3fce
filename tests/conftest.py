"""Pytest configuration and shared fixtures for testing"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from culture_pulse.data.catalog import CULTURE_PULSE_QUESTIONS, LEADERSHIP_QUESTIONS
from culture_pulse.memory.archive import SubmissionArchive
from culture_pulse.memory.models import FormState, StopKeepStart
from culture_pulse.memory.storage import LocalStorage
from culture_pulse.memory.store import FormStateStore


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    """Local storage in a per-test directory"""
    return LocalStorage(tmp_path / "storage")


@pytest.fixture
def store(storage: LocalStorage) -> FormStateStore:
    """Form state store backed by the per-test storage"""
    return FormStateStore(storage)


@pytest.fixture
def archive(storage: LocalStorage) -> SubmissionArchive:
    """Submission archive backed by the per-test storage"""
    return SubmissionArchive(storage)


@pytest.fixture
def complete_state() -> FormState:
    """Form state with every main-flow section complete"""
    return FormState(
        wins_text="Shipped the billing revamp",
        quick_picks=["impact", "learning"],
        learning_follow_up=True,
        selected_learning_teammate_ids=["md-ali-chowdhury"],
        blocker_text="Waiting on access",
        selected_tags=["tools"],
        invent_text="Self-serve access requests",
        people_blocker_text="Handoffs were slow",
        selected_teammates=["suha-hussein"],
        teammate_specific_feedback={"suha-hussein": "More context in tickets"},
        selected_blocker_tags_by_teammate={"suha-hussein": ["context", "handoffs"]},
        ratings={qid: 8 for qid in CULTURE_PULSE_QUESTIONS},
        strongest_value="Product First",
        weakest_value="Debate Openly, Commit Fully",
        shoutout_selected_teammates=["maheem-khondoker"],
        selected_impact_by_teammate={"maheem-khondoker": ["unblocked", "clarity"]},
        note_text="Thanks for the pairing sessions",
        feedback_selected_leaders=["sheikh-mohammed-fahim"],
        feedback_leader_ratings={"sheikh-mohammed-fahim": {qid: 9 for qid in LEADERSHIP_QUESTIONS}},
        feedback_leader_feedback={"sheikh-mohammed-fahim": "Great leadership"},
        feedback_leader_stop_keep_start={
            "sheikh-mohammed-fahim": StopKeepStart(stop="", keep="Transparency", start="Skip-levels"),
        },
        culture_text="Trust and candour",
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )
