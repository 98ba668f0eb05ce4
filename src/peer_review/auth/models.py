"""
peer_review.auth.models

Auth domain models.

Responsibilities:
- Define the role hierarchy used for privilege checks.
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Role(enum.StrEnum):
    # Declaration order is privilege order: each role includes the ones above it.
    student = "student"
    teaching_assistant = "teaching_assistant"
    instructor = "instructor"
    administrator = "administrator"
    super_administrator = "super_administrator"

    @property
    def level(self) -> int:
        return list(Role).index(self)


def role_level(name: str) -> int:
    try:
        return Role(name).level
    except ValueError:
        return -1


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity.
    """

    subject: str
    roles: frozenset[str]

    @property
    def privilege_level(self) -> int:
        return max((role_level(r) for r in self.roles), default=-1)

    def has_privileges_of(self, role: Role) -> bool:
        return self.privilege_level >= role.level

    @property
    def is_teaching_staff(self) -> bool:
        return self.has_privileges_of(Role.teaching_assistant)
