import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace

import pytest

from evoting.errors import AlreadyVoted, InvalidCandidate, InvalidVoter, VoterNotRegistered, VotingClosed
from evoting.extensions import db
from evoting.models.candidate import Candidate
from evoting.services import candidate_tally, settings_store, voter_registry
from evoting.services.voting import cast_vote


def _tallies():
    return {c.number: c.votes for c in candidate_tally.list_candidates()}


def test_accepted_vote_marks_voter_and_increments_tally(app, make_candidate, register, open_voting):
    first = make_candidate(1)
    make_candidate(2)
    register("NISN1")

    receipt = cast_vote(str(first.id), "NISN1")

    assert receipt.candidate_id == first.id
    assert receipt.voter_identifier == "NISN1"
    assert receipt.session_id == "default-session"
    assert _tallies() == {1: 1, 2: 0}

    voter = voter_registry.find_by_identifier("NISN1")
    assert voter.has_voted is True
    assert voter.voted_candidate_id == first.id
    assert voter.session_id == "default-session"
    assert voter.voted_at is not None


def test_identifier_is_trimmed(app, make_candidate, register, open_voting):
    first = make_candidate(1)
    register("NISN1")

    assert cast_vote(first.id, "  NISN1 ").voter_identifier == "NISN1"


def test_second_vote_rejected_and_discloses_first_choice(app, make_candidate, register, open_voting):
    first = make_candidate(1)
    second = make_candidate(2)
    register("NISN1")
    cast_vote(first.id, "NISN1")

    for target in (second, first):
        with pytest.raises(AlreadyVoted) as exc:
            cast_vote(target.id, "NISN1")
        assert exc.value.voted_candidate_id == str(first.id)

    assert _tallies() == {1: 1, 2: 0}


def test_closed_session_blocks_everything(app, make_candidate, register):
    first = make_candidate(1)
    register("NISN1")

    for candidate_id, identifier in [(first.id, "NISN1"), ("garbage", ""), (uuid.uuid4(), "unknown"), (None, None)]:
        with pytest.raises(VotingClosed):
            cast_vote(candidate_id, identifier)

    assert _tallies() == {1: 0}
    assert voter_registry.find_by_identifier("NISN1").has_voted is False


@pytest.mark.parametrize("candidate_id", ["not-a-uuid", None, "", "00000000-0000-0000-0000-000000000000"])
def test_invalid_candidate(app, register, open_voting, candidate_id):
    register("NISN1")
    with pytest.raises(InvalidCandidate):
        cast_vote(candidate_id, "NISN1")
    assert voter_registry.find_by_identifier("NISN1").has_voted is False


@pytest.mark.parametrize("identifier", ["", "   ", None])
def test_invalid_voter(app, make_candidate, open_voting, identifier):
    first = make_candidate(1)
    with pytest.raises(InvalidVoter):
        cast_vote(first.id, identifier)


def test_candidate_checked_before_voter(app, open_voting):
    with pytest.raises(InvalidCandidate):
        cast_vote("not-a-uuid", "")


def test_unregistered_voter_rejected_in_registry_mode(app, make_candidate, open_voting):
    first = make_candidate(1)

    with pytest.raises(VoterNotRegistered):
        cast_vote(first.id, "stranger")

    assert voter_registry.find_by_identifier("stranger") is None
    assert _tallies() == {1: 0}


def test_self_service_mode_registers_on_first_vote(app, make_candidate, open_voting):
    app.config["ALLOW_SELF_SERVICE_VOTERS"] = True
    first = make_candidate(1)
    second = make_candidate(2)

    cast_vote(first.id, "device-abc")
    with pytest.raises(AlreadyVoted) as exc:
        cast_vote(second.id, "device-abc")

    assert exc.value.voted_candidate_id == str(first.id)
    assert voter_registry.find_by_identifier("device-abc").has_voted is True
    assert _tallies() == {1: 1, 2: 0}


def test_stale_read_is_caught_by_conditional_write(app, make_candidate, register, open_voting, monkeypatch):
    first = make_candidate(1)
    second = make_candidate(2)
    register("NISN1")
    cast_vote(first.id, "NISN1")

    real_lookup = voter_registry.find_by_identifier
    calls = []

    def stale_then_real(identifier):
        calls.append(identifier)
        if len(calls) == 1:
            # Snapshot taken before the competing request committed
            return SimpleNamespace(has_voted=False, voted_candidate_id=None)
        return real_lookup(identifier)

    monkeypatch.setattr(voter_registry, "find_by_identifier", stale_then_real)

    with pytest.raises(AlreadyVoted) as exc:
        cast_vote(second.id, "NISN1")

    assert exc.value.voted_candidate_id == str(first.id)
    assert _tallies() == {1: 1, 2: 0}


def test_candidate_deleted_mid_vote_leaves_voter_unmarked(app, make_candidate, register, open_voting, monkeypatch):
    first = make_candidate(1)
    register("NISN1")
    monkeypatch.setattr(candidate_tally, "increment_votes", lambda candidate_id: False)

    with pytest.raises(InvalidCandidate):
        cast_vote(first.id, "NISN1")

    assert voter_registry.find_by_identifier("NISN1").has_voted is False


def test_session_id_recorded_on_vote(app, make_candidate, register, open_voting):
    first = make_candidate(1)
    register("NISN1")
    session_id = settings_store.rotate_voting_session_id()

    assert cast_vote(first.id, "NISN1").session_id == session_id
    assert voter_registry.find_by_identifier("NISN1").session_id == session_id


def test_concurrent_votes_for_one_voter(app, make_candidate, register, open_voting):
    candidate_ids = [make_candidate(n).id for n in range(1, 6)]
    register("RACER")
    db.session.remove()

    barrier = threading.Barrier(len(candidate_ids))

    def attempt(candidate_id):
        with app.app_context():
            barrier.wait()
            try:
                cast_vote(candidate_id, "RACER")
                return "accepted"
            except AlreadyVoted:
                return "already_voted"
            finally:
                db.session.remove()

    with ThreadPoolExecutor(max_workers=len(candidate_ids)) as pool:
        outcomes = list(pool.map(attempt, candidate_ids))

    assert outcomes.count("accepted") == 1
    assert outcomes.count("already_voted") == len(candidate_ids) - 1
    assert sum(c.votes for c in Candidate.query.all()) == 1


def test_concurrent_first_votes_for_unregistered_self_service_voter(app, make_candidate, open_voting):
    app.config["ALLOW_SELF_SERVICE_VOTERS"] = True
    candidate_ids = [make_candidate(n).id for n in range(1, 6)]
    db.session.remove()

    barrier = threading.Barrier(len(candidate_ids))

    def attempt(candidate_id):
        with app.app_context():
            barrier.wait()
            try:
                cast_vote(candidate_id, "device-new")
                return "accepted"
            except AlreadyVoted:
                return "already_voted"
            finally:
                db.session.remove()

    with ThreadPoolExecutor(max_workers=len(candidate_ids)) as pool:
        outcomes = list(pool.map(attempt, candidate_ids))

    assert outcomes.count("accepted") == 1
    assert outcomes.count("already_voted") == len(candidate_ids) - 1
    assert sum(c.votes for c in Candidate.query.all()) == 1
    assert voter_registry.count_voted() == 1


def test_concurrent_votes_for_one_candidate_all_counted(app, make_candidate, register, open_voting):
    candidate = make_candidate(1)
    voters = [f"V{i}" for i in range(8)]
    register(*voters)
    candidate_id = candidate.id
    db.session.remove()

    barrier = threading.Barrier(len(voters))

    def attempt(identifier):
        with app.app_context():
            barrier.wait()
            try:
                cast_vote(candidate_id, identifier)
            finally:
                db.session.remove()

    with ThreadPoolExecutor(max_workers=len(voters)) as pool:
        list(pool.map(attempt, voters))

    assert db.session.get(Candidate, candidate_id).votes == len(voters)
    assert voter_registry.count_voted() == len(voters)
