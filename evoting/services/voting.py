"""
Vote casting protocol.

Checks run in a fixed order and nothing is written until all of them pass:

1. voting session open          -> VotingClosed
2. candidate exists             -> InvalidCandidate
3. voter identifier non-empty   -> InvalidVoter
4. voter registered (registry)  -> VoterNotRegistered
5. voter has not voted yet      -> AlreadyVoted

The accepted vote is two writes in one transaction: the conditional
"mark voted" UPDATE, which is the only serialization point between
concurrent requests for one identifier, then the tally increment.
"""
from dataclasses import dataclass
from datetime import datetime

from flask import current_app

from ..errors import AlreadyVoted, InvalidCandidate, InvalidVoter, VoterNotRegistered, VotingClosed
from ..extensions import db
from ..signals import invalidate_views
from . import candidate_tally, settings_store, voter_registry
from .storage import storage_errors


@dataclass(frozen=True)
class VoteReceipt:
    candidate_id: object
    voter_identifier: str
    session_id: str
    voted_at: datetime


def self_service_enabled() -> bool:
    return bool(current_app.config.get("ALLOW_SELF_SERVICE_VOTERS", False))


def _already_voted(identifier: str) -> AlreadyVoted:
    voter = voter_registry.find_by_identifier(identifier)
    return AlreadyVoted(voter.voted_candidate_id if voter is not None else None)


def cast_vote(candidate_id, voter_identifier) -> VoteReceipt:
    if not settings_store.get_voting_status():
        raise VotingClosed()

    candidate = candidate_tally.get_candidate(candidate_id)
    if candidate is None:
        raise InvalidCandidate()

    identifier = voter_identifier.strip() if isinstance(voter_identifier, str) else ""
    if not identifier:
        raise InvalidVoter()

    allow_create = self_service_enabled()
    voter = voter_registry.find_by_identifier(identifier)
    if voter is None and not allow_create:
        raise VoterNotRegistered()
    if voter is not None and voter.has_voted:
        raise AlreadyVoted(voter.voted_candidate_id)

    candidate_pk = candidate.id
    session_id = settings_store.get_voting_session_id()
    voted_at = datetime.utcnow()
    with storage_errors("casting vote"):
        if not voter_registry.mark_voted(identifier, candidate_pk, session_id, voted_at, allow_create=allow_create):
            # Lost the race to a concurrent request (or the row vanished)
            db.session.rollback()
            if voter_registry.find_by_identifier(identifier) is None and not allow_create:
                raise VoterNotRegistered()
            raise _already_voted(identifier)

        if not candidate_tally.increment_votes(candidate_pk):
            # Candidate deleted between the check and the write
            db.session.rollback()
            raise InvalidCandidate()

        db.session.commit()

    current_app.logger.info("Vote accepted for candidate %s (session %s)", candidate_pk, session_id)
    invalidate_views("candidates", "results", "admin")

    return VoteReceipt(
        candidate_id=candidate_pk,
        voter_identifier=identifier,
        session_id=session_id,
        voted_at=voted_at,
    )
