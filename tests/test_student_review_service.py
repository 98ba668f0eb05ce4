"""
tests.test_student_review_service

StudentReviewService against a throwaway SQLite database.

Data is written in one session and read back in a fresh one, the way a
request would see it.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from peer_review.db.errors import RecordNotFoundError
from peer_review.db.models import DeadlineType
from peer_review.db.repositories.assignments import AssignmentRepo
from peer_review.db.repositories.participants import ParticipantRepo
from peer_review.db.repositories.reviews import ReviewRepo
from peer_review.db.repositories.teams import TeamRepo
from peer_review.db.repositories.users import UserRepo
from peer_review.services.errors import ParticipantLoadError
from peer_review.services.student_review_service import (
    StudentReviewService,
    review_status,
    sort_for_calibration,
)

NOW = datetime(2025, 3, 1, 12, 0, 0)


async def _seed(
    session_factory,
    *,
    is_calibrated: bool = False,
    bidding: bool = False,
    team_reviewing: bool = False,
    on_team: bool = True,
) -> SimpleNamespace:
    async with session_factory() as s:
        user = await UserRepo(s).create(name="student1", full_name="Test User")
        author = await UserRepo(s).create(name="author1")
        assignment = await AssignmentRepo(s).create(
            name="Test Assignment",
            is_calibrated=is_calibrated,
            bidding_for_reviews_enabled=bidding,
            team_reviewing_enabled=team_reviewing,
        )
        participant = await ParticipantRepo(s).create(
            user_id=user.id, assignment_id=assignment.id, handle="tester"
        )
        teams = TeamRepo(s)
        own_team = None
        if on_team:
            own_team = await teams.create(
                assignment_id=assignment.id, name="reviewers", user_ids=[user.id]
            )
        reviewee = await teams.create(
            assignment_id=assignment.id, name="authors", user_ids=[author.id]
        )
        world = SimpleNamespace(
            user_id=user.id,
            assignment_id=assignment.id,
            participant_id=participant.id,
            team_id=own_team.id if own_team else None,
            reviewee_id=reviewee.id,
        )
        await s.commit()
    return world


async def _load(session_factory, participant_id, **kwargs) -> StudentReviewService:
    async with session_factory() as s:
        return await StudentReviewService.load(s, participant_id, now=NOW, **kwargs)


@pytest.mark.asyncio
async def test_loads_participant_and_assignment(session_factory) -> None:
    world = await _seed(session_factory)

    svc = await _load(session_factory, str(world.participant_id))

    assert svc.participant.id == world.participant_id
    assert svc.assignment.id == world.assignment_id
    assert svc.assignment.name == "Test Assignment"


@pytest.mark.asyncio
async def test_sets_topic_id_and_review_phase(session_factory) -> None:
    world = await _seed(session_factory)
    async with session_factory() as s:
        teams = TeamRepo(s)
        topic = await teams.create_topic(assignment_id=world.assignment_id, topic_name="Parsers")
        await teams.sign_up(team_id=world.team_id, topic_id=topic.id)
        assignments = AssignmentRepo(s)
        await assignments.add_due_date(
            assignment_id=world.assignment_id,
            deadline_type=DeadlineType.submission,
            due_at=NOW - timedelta(days=3),
        )
        await assignments.add_due_date(
            assignment_id=world.assignment_id,
            deadline_type=DeadlineType.review,
            due_at=NOW + timedelta(days=4),
        )
        await s.commit()
        topic_id = topic.id

    svc = await _load(session_factory, world.participant_id)

    assert svc.topic_id == topic_id
    assert svc.review_phase == "review"


@pytest.mark.asyncio
async def test_review_phase_unknown_without_due_dates(session_factory) -> None:
    world = await _seed(session_factory)

    svc = await _load(session_factory, world.participant_id)

    assert svc.topic_id is None
    assert svc.review_phase == "Unknown"


@pytest.mark.asyncio
async def test_missing_participant_raises_wrapped_error(session_factory) -> None:
    with pytest.raises(RuntimeError, match=r"Failed to load participant data: RecordNotFoundError"):
        await _load(session_factory, "999")


@pytest.mark.asyncio
async def test_wrapped_error_keeps_cause(session_factory) -> None:
    with pytest.raises(ParticipantLoadError) as excinfo:
        await _load(session_factory, "not-a-number")
    assert isinstance(excinfo.value.__cause__, RecordNotFoundError)
    assert excinfo.value.__cause__.model == "AssignmentParticipant"


@pytest.mark.asyncio
async def test_oversized_participant_id_raises_wrapped_error(session_factory) -> None:
    with pytest.raises(ParticipantLoadError, match=r"Failed to load participant data"):
        await _load(session_factory, "99999999999999999999")


@pytest.mark.asyncio
@pytest.mark.parametrize("enabled", [True, False])
async def test_bidding_enabled_mirrors_assignment(session_factory, enabled: bool) -> None:
    world = await _seed(session_factory, bidding=enabled)

    svc = await _load(session_factory, world.participant_id)

    assert svc.bidding_enabled() is enabled


async def _add_maps(session_factory, world, ids, *, reviewer_id=None, team=False) -> None:
    async with session_factory() as s:
        reviews = ReviewRepo(s)
        for map_id in ids:
            await reviews.create_map(
                id=map_id,
                reviewer_id=reviewer_id if reviewer_id is not None else world.participant_id,
                reviewee_id=world.reviewee_id,
                reviewed_object_id=world.assignment_id,
                team_reviewing_enabled=team,
            )
        await s.commit()


@pytest.mark.asyncio
async def test_calibrated_mappings_sorted_by_id_mod_5(session_factory) -> None:
    world = await _seed(session_factory, is_calibrated=True)
    await _add_maps(session_factory, world, [1, 6, 2, 7, 5])

    svc = await _load(session_factory, world.participant_id)

    assert [m.id for m in svc.review_mappings] == [5, 1, 6, 2, 7]


@pytest.mark.asyncio
async def test_uncalibrated_mappings_keep_id_order(session_factory) -> None:
    world = await _seed(session_factory)
    await _add_maps(session_factory, world, [1, 6, 2, 7, 5])

    svc = await _load(session_factory, world.participant_id)

    assert [m.id for m in svc.review_mappings] == [1, 2, 5, 6, 7]


def test_calibration_sort_is_stable() -> None:
    maps = [SimpleNamespace(id=i, tag=tag) for i, tag in [(11, "a"), (1, "b"), (6, "c"), (10, "d")]]

    ordered = sort_for_calibration(maps)

    assert [m.tag for m in ordered] == ["d", "a", "b", "c"]


@pytest.mark.asyncio
async def test_no_reviewer_yields_empty_mappings_and_zero_counters(session_factory) -> None:
    world = await _seed(session_factory, team_reviewing=True, on_team=False)
    await _add_maps(session_factory, world, [1, 2], team=True)

    svc = await _load(session_factory, world.participant_id)

    assert svc.review_mappings == []
    assert svc.num_reviews_total == 0
    assert svc.num_reviews_completed == 0
    assert svc.num_reviews_in_progress == 0


@pytest.mark.asyncio
async def test_team_reviewing_uses_team_as_reviewer(session_factory) -> None:
    world = await _seed(session_factory, team_reviewing=True)
    await _add_maps(session_factory, world, [3, 4], reviewer_id=world.team_id, team=True)
    # Same reviewer id, but recorded for individual reviewing: filtered out.
    await _add_maps(session_factory, world, [8], reviewer_id=world.team_id, team=False)

    svc = await _load(session_factory, world.participant_id)

    assert [m.id for m in svc.review_mappings] == [3, 4]


@pytest.mark.asyncio
async def test_review_progress_counts_latest_submitted_responses(session_factory) -> None:
    world = await _seed(session_factory)
    await _add_maps(session_factory, world, [1, 2, 3, 4])
    async with session_factory() as s:
        reviews = ReviewRepo(s)
        # 1: never started
        # 2: draft only
        await reviews.add_response(map_id=2, is_submitted=False)
        # 3: draft in round 1, submitted in round 2
        await reviews.add_response(map_id=3, is_submitted=False, round=1)
        await reviews.add_response(map_id=3, is_submitted=True, round=2)
        # 4: submitted in round 1, reopened as a draft in round 2
        await reviews.add_response(map_id=4, is_submitted=True, round=1)
        await reviews.add_response(map_id=4, is_submitted=False, round=2)
        await s.commit()

    svc = await _load(session_factory, world.participant_id)

    assert [review_status(m) for m in svc.review_mappings] == [
        "not_started",
        "in_progress",
        "submitted",
        "in_progress",
    ]
    assert svc.num_reviews_total == 4
    assert svc.num_reviews_completed == 1
    assert svc.num_reviews_in_progress == 3


@pytest.mark.asyncio
async def test_loads_sample_review_response_ids(session_factory) -> None:
    world = await _seed(session_factory)
    await _add_maps(session_factory, world, [1])
    async with session_factory() as s:
        reviews = ReviewRepo(s)
        responses = [await reviews.add_response(map_id=1, is_submitted=True) for _ in range(3)]
        for r in reversed(responses):
            await reviews.add_sample_review(assignment_id=world.assignment_id, response_id=r.id)
        await s.commit()
        expected = [r.id for r in reversed(responses)]

    svc = await _load(session_factory, world.participant_id)

    assert svc.response_ids == expected


@pytest.mark.asyncio
async def test_empty_sample_reviews(session_factory) -> None:
    world = await _seed(session_factory)

    svc = await _load(session_factory, world.participant_id)

    assert svc.response_ids == []


# --- Module Notes -----------------------------------------------------------
# Calibration order is checked with pinned mapping ids; ids come from the
# database in every other test.
