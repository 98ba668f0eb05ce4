"""
peer_review.db.models

Core persistence schema for the peer-review portal.

Responsibilities:
- Define ORM models for the review workflow:
  - User / Assignment / AssignmentParticipant: who takes part in what
  - Team / TeamUser / SignUpTopic / SignedUpTeam: team membership and topic signups
  - DueDate: per-assignment (optionally per-topic) deadlines that drive the review phase
  - ReviewResponseMap / Response: reviewer-to-reviewee mappings and their filled-in reviews
  - SampleReview: instructor-selected responses shown as examples
"""

from __future__ import annotations

import enum
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from peer_review.db.base import Base


def utcnow() -> datetime:
    # Persist naive UTC timestamps; SQLite has no tz-aware datetime type.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class DeadlineType(enum.StrEnum):
    submission = "submission"
    review = "review"
    metareview = "metareview"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="student")
    # Preferred UI locale; None means "negotiate from the request".
    locale: Mapped[str | None] = mapped_column(String(16), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class Assignment(Base):
    __tablename__ = "assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)

    is_calibrated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    bidding_for_reviews_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    team_reviewing_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class AssignmentParticipant(Base):
    __tablename__ = "participants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id"), nullable=False, index=True
    )
    handle: Mapped[str] = mapped_column(String(128), nullable=False, default="")

    can_submit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    can_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (UniqueConstraint("assignment_id", "user_id", name="uq_participant"),)


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id"), nullable=False, index=True
    )


class TeamUser(Base):
    __tablename__ = "teams_users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_team_user"),)


class SignUpTopic(Base):
    __tablename__ = "sign_up_topics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id"), nullable=False, index=True
    )
    topic_name: Mapped[str] = mapped_column(String(256), nullable=False)


class SignedUpTeam(Base):
    __tablename__ = "signed_up_teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    topic_id: Mapped[int] = mapped_column(ForeignKey("sign_up_topics.id"), nullable=False)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False, index=True)
    is_waitlisted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class DueDate(Base):
    __tablename__ = "due_dates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id"), nullable=False, index=True
    )
    # None: applies to every topic of the assignment.
    topic_id: Mapped[int | None] = mapped_column(ForeignKey("sign_up_topics.id"), nullable=True)
    deadline_type: Mapped[DeadlineType] = mapped_column(Enum(DeadlineType), nullable=False)
    due_at: Mapped[datetime] = mapped_column(nullable=False)
    round: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __table_args__ = (Index("ix_due_dates_assignment_due", "assignment_id", "due_at"),)


class ReviewResponseMap(Base):
    __tablename__ = "review_response_maps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Participant id, or team id when the assignment reviews as teams.
    reviewer_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    reviewee_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)
    reviewed_object_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id"), nullable=False, index=True
    )
    team_reviewing_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    responses: Mapped[list[Response]] = relationship(
        back_populates="map",
        lazy="selectin",
        order_by=lambda: (Response.round, Response.created_at, Response.id),
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_review_maps_reviewer_team", "reviewer_id", "team_reviewing_enabled"),
    )


class Response(Base):
    __tablename__ = "responses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    map_id: Mapped[int] = mapped_column(
        ForeignKey("review_response_maps.id"), nullable=False, index=True
    )
    round: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_submitted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)

    map: Mapped[ReviewResponseMap] = relationship(back_populates="responses")


class SampleReview(Base):
    __tablename__ = "sample_reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id"), nullable=False, index=True
    )
    response_id: Mapped[int] = mapped_column(ForeignKey("responses.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("assignment_id", "response_id", name="uq_sample_review"),
    )


# --- Module Notes -----------------------------------------------------------
# `ReviewResponseMap.responses` is ordered oldest-first, so `responses[-1]` is the
# latest round's latest response.
