import uuid

from evoting.extensions import db
from evoting.models.voter import Voter
from evoting.services import voter_registry


def test_parse_tokens_trims_and_dedupes():
    text = "  NISN1\n\nNISN2\r\nNISN1\n   \n"
    assert voter_registry.parse_tokens(text) == {"NISN1", "NISN2"}


def test_register_batch_counts_duplicates(app):
    assert voter_registry.register_batch(["A", "B"]) == (2, 0)
    assert voter_registry.register_batch(["B", "C"]) == (1, 1)

    identifiers = sorted(v.identifier for v in voter_registry.list_voters())
    assert identifiers == ["A", "B", "C"]
    assert all(not v.has_voted for v in voter_registry.list_voters())


def test_register_batch_leaves_existing_voter_untouched(app):
    voter_registry.register_batch(["A"])
    cid = uuid.uuid4()
    assert voter_registry.mark_voted("A", cid, "s1")
    db.session.commit()

    assert voter_registry.register_batch(["A"]) == (0, 1)
    voter = voter_registry.find_by_identifier("A")
    assert voter.has_voted is True
    assert voter.voted_candidate_id == cid


def test_register_batch_ignores_blank_input(app):
    assert voter_registry.register_batch(["", "   "]) == (0, 0)
    assert Voter.query.count() == 0


def test_mark_voted_is_conditional(app):
    voter_registry.register_batch(["A"])

    assert voter_registry.mark_voted("A", uuid.uuid4(), "s1") is True
    db.session.commit()
    assert voter_registry.mark_voted("A", uuid.uuid4(), "s1") is False
    db.session.rollback()


def test_mark_voted_unknown_identifier_without_create(app):
    assert voter_registry.mark_voted("ghost", uuid.uuid4(), "s1") is False
    assert voter_registry.find_by_identifier("ghost") is None


def test_mark_voted_self_service_creates_row(app):
    cid = uuid.uuid4()

    assert voter_registry.mark_voted("device-1", cid, "s1", allow_create=True) is True
    db.session.commit()

    voter = voter_registry.find_by_identifier("device-1")
    assert voter.has_voted is True
    assert voter.voted_candidate_id == cid
    assert voter.session_id == "s1"
    assert voter.voted_at is not None

    assert voter_registry.mark_voted("device-1", uuid.uuid4(), "s1", allow_create=True) is False


def test_voter_status(app):
    voter_registry.register_batch(["A", "B"])
    cid = uuid.uuid4()
    voter_registry.mark_voted("A", cid, "s1")
    db.session.commit()

    assert voter_registry.get_voter_status("A") == {"has_voted": True, "registered": True, "voted_candidate_id": cid}
    assert voter_registry.get_voter_status("B") == {"has_voted": False, "registered": True, "voted_candidate_id": None}
    assert voter_registry.get_voter_status("Z")["registered"] is False
    assert voter_registry.get_voter_status("")["has_voted"] is False


def test_reset_vote_flags_keeps_registration(app):
    voter_registry.register_batch(["A", "B"])
    voter_registry.mark_voted("A", uuid.uuid4(), "s1")
    db.session.commit()

    assert voter_registry.reset_vote_flags() == 2
    db.session.commit()

    for voter in voter_registry.list_voters():
        assert voter.has_voted is False
        assert voter.voted_at is None
        assert voter.voted_candidate_id is None
    assert voter_registry.count_voted() == 0


def test_clear_all(app):
    voter_registry.register_batch(["A", "B", "C"])
    assert voter_registry.clear_all() == 3
    db.session.commit()
    assert voter_registry.list_voters() == []
