"""
Voter registry.

A voter row is keyed by its external ``identifier`` (an admin-issued token or
a device-generated id). ``has_voted`` is the only authority on whether the
identifier may vote again; client-side caches are hints.

``mark_voted``, ``reset_vote_flags`` and ``clear_all`` take part in the
caller's unit of work and do not commit. ``register_batch`` commits.
"""
from datetime import datetime
from typing import Iterable

from flask import current_app
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models.voter import Voter
from .storage import storage_errors

_LOOKUP_CHUNK = 500


def parse_tokens(text: str) -> set[str]:
    """Split a newline separated token list, dropping blanks and repeats."""
    return {line.strip() for line in (text or "").splitlines() if line.strip()}


def find_by_identifier(identifier: str) -> Voter | None:
    with storage_errors("looking up voter"):
        return db.session.scalar(select(Voter).where(Voter.identifier == identifier))


def list_voters() -> list[Voter]:
    with storage_errors("listing voters"):
        return list(db.session.scalars(select(Voter).order_by(Voter.created_at.asc(), Voter.identifier.asc())))


def count_voted() -> int:
    with storage_errors("counting voters"):
        return db.session.scalar(select(func.count(Voter.id)).where(Voter.has_voted.is_(True))) or 0


def get_voter_status(identifier: str) -> dict:
    identifier = (identifier or "").strip()
    if not identifier:
        return {"has_voted": False, "registered": False, "voted_candidate_id": None}

    voter = find_by_identifier(identifier)
    if voter is None:
        return {"has_voted": False, "registered": False, "voted_candidate_id": None}

    return {
        "has_voted": bool(voter.has_voted),
        "registered": True,
        "voted_candidate_id": voter.voted_candidate_id if voter.has_voted else None,
    }


def _existing_identifiers(identifiers: list[str]) -> set[str]:
    found = set()
    for start in range(0, len(identifiers), _LOOKUP_CHUNK):
        chunk = identifiers[start:start + _LOOKUP_CHUNK]
        found.update(db.session.scalars(select(Voter.identifier).where(Voter.identifier.in_(chunk))))
    return found


def register_batch(identifiers: Iterable[str]) -> tuple[int, int]:
    """
    Pre-register voter identifiers. Returns ``(inserted, duplicates)``; an
    identifier that already exists is left untouched and counted as duplicate.
    """
    wanted = sorted({i.strip() for i in identifiers if i and i.strip()})
    if not wanted:
        return 0, 0

    with storage_errors("registering voters"):
        existing = _existing_identifiers(wanted)
        new = [i for i in wanted if i not in existing]
        db.session.add_all([Voter(identifier=i, has_voted=False) for i in new])
        try:
            db.session.commit()
            inserted = len(new)
        except IntegrityError:
            # A concurrent import took some of them; settle row by row
            db.session.rollback()
            inserted = 0
            for identifier in new:
                db.session.add(Voter(identifier=identifier, has_voted=False))
                try:
                    db.session.commit()
                    inserted += 1
                except IntegrityError:
                    db.session.rollback()

    current_app.logger.info("Registered %d voter token(s), %d duplicate(s)", inserted, len(wanted) - inserted)
    return inserted, len(wanted) - inserted


def mark_voted(identifier: str, candidate_id, session_id: str, voted_at: datetime | None = None,
               allow_create: bool = False) -> bool:
    """
    Flip ``has_voted`` for ``identifier`` with one conditional UPDATE.

    Returns True only for the caller whose write matched a not-yet-voted row.
    With ``allow_create`` an unknown identifier is inserted already voted; a
    unique-constraint loss means a concurrent request won and the whole
    transaction is rolled back.
    """
    now = voted_at or datetime.utcnow()
    result = db.session.execute(
        update(Voter)
        .where(Voter.identifier == identifier, Voter.has_voted.is_(False))
        .values(has_voted=True, voted_at=now, voted_candidate_id=candidate_id, session_id=session_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 1:
        return True
    if not allow_create:
        return False

    db.session.add(Voter(
        identifier=identifier,
        has_voted=True,
        voted_at=now,
        voted_candidate_id=candidate_id,
        session_id=session_id,
    ))
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        return False
    return True


def reset_vote_flags() -> int:
    """Clear vote state on every voter, keeping registrations."""
    result = db.session.execute(
        update(Voter)
        .values(has_voted=False, voted_at=None, voted_candidate_id=None, session_id=None)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def clear_all() -> int:
    result = db.session.execute(delete(Voter).execution_options(synchronize_session=False))
    return result.rowcount or 0
