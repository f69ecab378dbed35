import pytest

from mentorship_api.core.transitions import Actor
from mentorship_api.database import SessionLocal
from mentorship_api.exceptions import (
    DuplicateRequestError,
    InvalidPayloadError,
    InvalidStatusTransitionError,
    NotFoundError,
    UnauthorizedError,
)
from mentorship_api.models import MentorshipRequest, MentorshipStatus, Role
from mentorship_api.schemas import MentorshipApply
from mentorship_api.services import MentorshipNotifier, MentorshipService
from tests.factories import FailingSender, make_request, make_user


def _actor(user):
    return Actor(id=user.id, roles=user.role_set)


@pytest.fixture
def service(db, sender):
    return MentorshipService(db, MentorshipNotifier(sender))


@pytest.fixture
def pair(db):
    mentor = make_user(db, roles=(Role.MENTOR,))
    mentee = make_user(db, roles=(Role.MENTEE,))
    return mentor, mentee


def test_approve_commits_and_notifies_mentee_once(db, service, sender, pair):
    mentor, mentee = pair
    request = make_request(db, mentor=mentor, mentee=mentee)

    updated = service.update_status(request.id, _actor(mentor), MentorshipStatus.APPROVED, "dropped")

    assert updated.status == MentorshipStatus.APPROVED.value
    assert updated.reason is None
    assert len(sender.sent) == 1
    recipient_id, template_name, _ = sender.sent[0]
    assert recipient_id == mentee.id
    assert template_name == "mentorship-accepted"


def test_reject_stores_reason_and_sends_it(db, service, sender, pair):
    mentor, mentee = pair
    request = make_request(db, mentor=mentor, mentee=mentee)

    updated = service.update_status(request.id, _actor(mentor), MentorshipStatus.REJECTED, "Other commitments")

    assert updated.reason == "Other commitments"
    assert sender.sent[0][1] == "mentorship-declined"
    assert sender.sent[0][2]["reason"] == "Other commitments"


def test_cancel_notifies_mentor(db, service, sender, pair):
    mentor, mentee = pair
    request = make_request(db, mentor=mentor, mentee=mentee)

    service.update_status(request.id, _actor(mentee), MentorshipStatus.CANCELLED)

    assert len(sender.sent) == 1
    assert sender.sent[0][:2] == (mentor.id, "mentorship-cancelled")


def test_rejected_attempt_changes_nothing_and_sends_nothing(db, service, sender, pair):
    mentor, mentee = pair
    request = make_request(db, mentor=mentor, mentee=mentee)

    with pytest.raises(InvalidStatusTransitionError):
        service.update_status(request.id, _actor(mentee), MentorshipStatus.APPROVED)

    db.refresh(request)
    assert request.status == MentorshipStatus.PENDING.value
    assert sender.sent == []


def test_unrelated_user_is_unauthorized(db, service, sender, pair):
    mentor, mentee = pair
    stranger = make_user(db)
    request = make_request(db, mentor=mentor, mentee=mentee)

    with pytest.raises(UnauthorizedError):
        service.update_status(request.id, _actor(stranger), MentorshipStatus.CANCELLED)
    assert sender.sent == []


def test_missing_request_is_not_found(service, pair):
    mentor, _ = pair

    with pytest.raises(NotFoundError):
        service.update_status(999, _actor(mentor), MentorshipStatus.APPROVED)


def test_second_transition_on_same_request_is_invalid(db, service, sender, pair):
    mentor, mentee = pair
    request = make_request(db, mentor=mentor, mentee=mentee)
    service.update_status(request.id, _actor(mentor), MentorshipStatus.APPROVED)

    with pytest.raises(InvalidStatusTransitionError):
        service.update_status(request.id, _actor(mentor), MentorshipStatus.REJECTED, "Changed my mind")

    assert len(sender.sent) == 1


def test_stale_read_loses_to_concurrent_writer(db, service, sender, pair):
    mentor, mentee = pair
    request = make_request(db, mentor=mentor, mentee=mentee)

    stale_session = SessionLocal()
    try:
        stale_service = MentorshipService(stale_session, MentorshipNotifier(sender))
        # Loads the PENDING row into the stale session's identity map
        stale_service.validator.get_request_or_404(request.id)

        service.update_status(request.id, _actor(mentee), MentorshipStatus.CANCELLED)
        sender.sent.clear()

        with pytest.raises(InvalidStatusTransitionError):
            stale_service.update_status(request.id, _actor(mentor), MentorshipStatus.APPROVED)
    finally:
        stale_session.close()

    db.expire_all()
    stored = db.query(MentorshipRequest).filter(MentorshipRequest.id == request.id).one()
    assert stored.status == MentorshipStatus.CANCELLED.value
    assert sender.sent == []


def test_notification_failure_does_not_undo_transition(db, pair):
    mentor, mentee = pair
    request = make_request(db, mentor=mentor, mentee=mentee)
    service = MentorshipService(db, MentorshipNotifier(FailingSender()))

    updated = service.update_status(request.id, _actor(mentor), MentorshipStatus.APPROVED)

    assert updated.status == MentorshipStatus.APPROVED.value
    db.expire_all()
    stored = db.query(MentorshipRequest).filter(MentorshipRequest.id == request.id).one()
    assert stored.status == MentorshipStatus.APPROVED.value


def test_create_request_is_pending_and_notifies_mentor(service, sender, pair):
    mentor, mentee = pair

    request = service.create_request(mentee, mentor.id, MentorshipApply(message="Please mentor me"))

    assert request.status == MentorshipStatus.PENDING.value
    assert request.reason is None
    assert sender.sent[0][:2] == (mentor.id, "mentorship-requested")


def test_create_request_rejects_duplicates_self_and_non_mentors(db, service, pair):
    mentor, mentee = pair
    service.create_request(mentee, mentor.id, MentorshipApply(message="Hello"))

    with pytest.raises(DuplicateRequestError):
        service.create_request(mentee, mentor.id, MentorshipApply(message="Hello again"))

    with pytest.raises(InvalidPayloadError):
        service.create_request(mentor, mentor.id, MentorshipApply(message="Me"))

    with pytest.raises(NotFoundError):
        service.create_request(mentor, mentee.id, MentorshipApply(message="Not a mentor"))


def test_listing_is_limited_to_self_or_admin(db, service, pair):
    mentor, mentee = pair
    admin = make_user(db, roles=(Role.ADMIN,))
    make_request(db, mentor=mentor, mentee=mentee)

    assert len(service.get_requests_for_user(mentee.id, _actor(mentee))) == 1
    assert len(service.get_requests_for_user(mentor.id, _actor(admin))) == 1
    with pytest.raises(UnauthorizedError):
        service.get_requests_for_user(mentee.id, _actor(mentor))


def test_concurrent_apply_is_stopped_by_database(db, service, pair, monkeypatch):
    mentor, mentee = pair
    service.create_request(mentee, mentor.id, MentorshipApply(message="First"))
    # Simulate a second apply that passed the pre-check before the first committed
    monkeypatch.setattr(service.validator, "check_no_pending_request", lambda mentee_id, mentor_id: None)

    with pytest.raises(DuplicateRequestError):
        service.create_request(mentee, mentor.id, MentorshipApply(message="Second"))

    pending = db.query(MentorshipRequest).filter(
        MentorshipRequest.mentee_id == mentee.id,
        MentorshipRequest.status == MentorshipStatus.PENDING.value,
    ).count()
    assert pending == 1


def test_pending_index_allows_new_request_after_terminal_one(db, service, pair):
    mentor, mentee = pair
    make_request(db, mentor=mentor, mentee=mentee, status=MentorshipStatus.REJECTED)

    request = service.create_request(mentee, mentor.id, MentorshipApply(message="Trying again"))

    assert request.status == MentorshipStatus.PENDING.value


def test_role_set_ignores_unknown_tags(db):
    user = make_user(db, roles=(Role.MENTOR,))
    user.roles = ["MENTOR", "GURU"]

    assert user.role_set == {Role.MENTOR}
