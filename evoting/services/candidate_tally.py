"""
Candidate records and their cached vote counters.

``votes`` is only ever changed with single-statement UPDATEs so concurrent
votes for the same candidate never lose an increment. Candidate ``number``
uniqueness is check-then-write; the unique index on the column catches the
rare concurrent admin edit that slips through.
"""
import uuid

from flask import current_app
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from ..errors import CandidateNotFound, DuplicateCandidateNumber
from ..extensions import db
from ..models.candidate import Candidate
from ..schemas.candidate import CandidateWriteSchema
from ..signals import invalidate_views
from ..utils.photos import photo_to_data_uri
from .storage import storage_errors

candidate_write_schema = CandidateWriteSchema()


def parse_candidate_id(candidate_id) -> uuid.UUID | None:
    if isinstance(candidate_id, uuid.UUID):
        return candidate_id
    try:
        return uuid.UUID(str(candidate_id))
    except (TypeError, ValueError, AttributeError):
        return None


def list_candidates() -> list[Candidate]:
    with storage_errors("listing candidates"):
        return list(db.session.scalars(select(Candidate).order_by(Candidate.number.asc())))


def get_candidate(candidate_id) -> Candidate | None:
    cid = parse_candidate_id(candidate_id)
    if cid is None:
        return None
    with storage_errors("loading candidate"):
        return db.session.get(Candidate, cid)


def increment_votes(candidate_id) -> bool:
    """Atomic ``votes = votes + 1``. Part of the caller's unit of work."""
    result = db.session.execute(
        update(Candidate)
        .where(Candidate.id == candidate_id)
        .values(votes=Candidate.votes + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def reset_votes() -> int:
    """Zero every tally. Part of the caller's unit of work."""
    result = db.session.execute(
        update(Candidate).values(votes=0).execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def _number_taken(number: int, exclude_id=None) -> bool:
    stmt = select(Candidate.id).where(Candidate.number == number)
    if exclude_id is not None:
        stmt = stmt.where(Candidate.id != exclude_id)
    return db.session.scalar(stmt.limit(1)) is not None


def add_candidate(payload, photo) -> Candidate:
    data = candidate_write_schema.load(payload)
    photo_url = photo_to_data_uri(photo, required=True)

    with storage_errors("adding candidate"):
        if _number_taken(data["number"]):
            raise DuplicateCandidateNumber(data["number"])

        candidate = Candidate(photo_url=photo_url, votes=0, **data)
        db.session.add(candidate)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise DuplicateCandidateNumber(data["number"])

    current_app.logger.info("Candidate %s (%s) added", candidate.number, candidate.id)
    invalidate_views()
    return candidate


def update_candidate(candidate_id, payload, photo=None) -> Candidate:
    cid = parse_candidate_id(candidate_id)
    if cid is None:
        raise CandidateNotFound()

    data = candidate_write_schema.load(payload)
    photo_url = photo_to_data_uri(photo, required=False)

    with storage_errors("updating candidate"):
        candidate = db.session.get(Candidate, cid)
        if candidate is None:
            raise CandidateNotFound()

        if _number_taken(data["number"], exclude_id=cid):
            raise DuplicateCandidateNumber(data["number"])

        for field, value in data.items():
            setattr(candidate, field, value)
        if photo_url:
            candidate.photo_url = photo_url

        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise DuplicateCandidateNumber(data["number"])

    current_app.logger.info("Candidate %s updated", cid)
    invalidate_views()
    return candidate


def delete_candidate(candidate_id) -> None:
    """Delete a candidate. Voter rows that reference it are left as they are."""
    cid = parse_candidate_id(candidate_id)
    if cid is None:
        raise CandidateNotFound()

    with storage_errors("deleting candidate"):
        candidate = db.session.get(Candidate, cid)
        if candidate is None:
            raise CandidateNotFound()
        db.session.delete(candidate)
        db.session.commit()

    current_app.logger.info("Candidate %s deleted", cid)
    invalidate_views()


def results_summary() -> dict:
    candidates = list_candidates()
    total_votes = sum(c.votes for c in candidates)

    results = []
    for c in candidates:
        pct = (c.votes / total_votes * 100.0) if total_votes > 0 else 0.0
        results.append({
            "candidate_id": c.id,
            "number": c.number,
            "name": c.name,
            "votes": c.votes,
            "percentage": round(pct, 2),
        })

    return {"total_votes": total_votes, "results": results}
