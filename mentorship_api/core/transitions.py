# mentorship_api/core/transitions.py
"""
Status transition rules for mentorship requests.

``authorize`` is a pure decision function: it takes a snapshot of a request,
the acting user and the requested status, and returns either the updated
snapshot or the reason the change was refused. It performs no I/O and never
mutates its input, so it is safe to call from any request context. Persisting
the result and dispatching the notification are the caller's job.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Union

from ..models import MentorshipStatus, Role


class Relation(str, Enum):
    MENTEE = "MENTEE"
    MENTOR = "MENTOR"
    ADMIN = "ADMIN"


class TransitionErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TRANSITION = "INVALID_TRANSITION"


# Which target statuses each relation may move a PENDING request to.
# Admins act with mentor-equivalent authority and cannot cancel.
ALLOWED_TARGETS: Dict[Relation, FrozenSet[MentorshipStatus]] = {
    Relation.MENTEE: frozenset({MentorshipStatus.CANCELLED}),
    Relation.MENTOR: frozenset({MentorshipStatus.APPROVED, MentorshipStatus.REJECTED}),
    Relation.ADMIN: frozenset({MentorshipStatus.APPROVED, MentorshipStatus.REJECTED}),
}


@dataclass(frozen=True)
class MentorshipRecord:
    id: int
    mentor_id: int
    mentee_id: int
    status: MentorshipStatus
    reason: Optional[str] = None

    @classmethod
    def from_model(cls, request) -> "MentorshipRecord":
        """Snapshot of a MentorshipRequest row."""
        return cls(
            id=request.id,
            mentor_id=request.mentor_id,
            mentee_id=request.mentee_id,
            status=MentorshipStatus(request.status),
            reason=request.reason,
        )


@dataclass(frozen=True)
class Actor:
    id: int
    roles: FrozenSet[Role] = frozenset()

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles


@dataclass(frozen=True)
class TransitionAccepted:
    record: MentorshipRecord
    previous_status: MentorshipStatus


@dataclass(frozen=True)
class TransitionRejected:
    kind: TransitionErrorKind
    detail: str


TransitionResult = Union[TransitionAccepted, TransitionRejected]


def relations_for(record: MentorshipRecord, actor_id: int, actor_roles: Iterable[Role]) -> FrozenSet[Relation]:
    """Relations the actor holds to the record.

    Admin role and mentor link are evaluated independently. An admin is never
    given the mentee relation, even when linked as the mentee.
    """
    roles = frozenset(actor_roles)
    relations = set()
    if Role.ADMIN in roles:
        relations.add(Relation.ADMIN)
    if actor_id == record.mentor_id:
        relations.add(Relation.MENTOR)
    if actor_id == record.mentee_id and Role.ADMIN not in roles:
        relations.add(Relation.MENTEE)
    return frozenset(relations)


def allowed_targets(relations: Iterable[Relation]) -> FrozenSet[MentorshipStatus]:
    targets: FrozenSet[MentorshipStatus] = frozenset()
    for relation in relations:
        targets = targets | ALLOWED_TARGETS.get(relation, frozenset())
    return targets


def authorize(
    record: MentorshipRecord,
    actor_id: int,
    actor_roles: Iterable[Role],
    requested_status: MentorshipStatus,
    requested_reason: Optional[str] = None,
) -> TransitionResult:
    """Decide whether ``actor_id`` may move ``record`` to ``requested_status``.

    Checks run in a fixed order and the first failure wins:
    relationship (UNAUTHORIZED), terminal state (INVALID_TRANSITION),
    role-to-target table (INVALID_TRANSITION). On success the returned record
    carries the new status, and ``reason`` only when the target is REJECTED.
    """
    relations = relations_for(record, actor_id, actor_roles)
    if not relations:
        return TransitionRejected(
            TransitionErrorKind.UNAUTHORIZED,
            "Not authorized to update this mentorship request",
        )

    if record.status != MentorshipStatus.PENDING:
        return TransitionRejected(
            TransitionErrorKind.INVALID_TRANSITION,
            f"Request is already {record.status.value}",
        )

    if requested_status not in allowed_targets(relations):
        return TransitionRejected(
            TransitionErrorKind.INVALID_TRANSITION,
            f"Not allowed to change status to {requested_status.value}",
        )

    reason = requested_reason if requested_status == MentorshipStatus.REJECTED else None
    updated = replace(record, status=requested_status, reason=reason)
    return TransitionAccepted(record=updated, previous_status=record.status)
