"""
Session reset and tally reconciliation.

Candidate ``votes`` counters are a cache; the voter registry is the source of
truth. ``reconcile_tallies`` rebuilds the cache from voter rows and can be run
any number of times.
"""
from flask import current_app
from sqlalchemy import delete, func, select

from ..extensions import db
from ..models.candidate import Candidate
from ..models.setting import Setting
from ..models.voter import Voter
from ..signals import invalidate_views
from . import candidate_tally, voter_registry
from .settings_store import new_session_id
from .storage import storage_errors


def reset_all_votes() -> dict:
    """
    Soft reset: zero every tally, clear every voter's vote state and rotate the
    voting session id, all in one transaction. Registered tokens stay usable.
    """
    session_id = new_session_id()
    with storage_errors("resetting votes"):
        candidates = candidate_tally.reset_votes()
        voters = voter_registry.reset_vote_flags()

        row = db.session.get(Setting, Setting.VOTING_SESSION_ID)
        if row is None:
            db.session.add(Setting(key=Setting.VOTING_SESSION_ID, value=session_id))
        else:
            row.value = session_id

        db.session.commit()

    current_app.logger.info(
        "Votes reset: %d candidate tally(ies) zeroed, %d voter(s) cleared, new session %s",
        candidates, voters, session_id,
    )
    invalidate_views()
    return {"candidates_reset": candidates, "voters_reset": voters, "session_id": session_id}


def reset_all_data() -> dict:
    """Hard reset: delete every candidate, voter and setting."""
    with storage_errors("resetting all data"):
        candidates = db.session.execute(delete(Candidate).execution_options(synchronize_session=False)).rowcount or 0
        voters = voter_registry.clear_all()
        settings = db.session.execute(delete(Setting).execution_options(synchronize_session=False)).rowcount or 0
        db.session.commit()

    current_app.logger.warning(
        "All election data wiped: %d candidate(s), %d voter(s), %d setting(s)",
        candidates, voters, settings,
    )
    invalidate_views()
    return {"candidates_deleted": candidates, "voters_deleted": voters, "settings_deleted": settings}


def _votes_by_candidate() -> dict:
    rows = db.session.execute(
        select(Voter.voted_candidate_id, func.count(Voter.id))
        .where(Voter.has_voted.is_(True), Voter.voted_candidate_id.is_not(None))
        .group_by(Voter.voted_candidate_id)
    ).all()
    return {candidate_id: int(count) for candidate_id, count in rows}


def reconcile_tallies() -> dict:
    """
    Recompute every candidate's ``votes`` from voter records.
    Returns ``{candidate_id: (old, new)}`` for the counters that changed.
    """
    with storage_errors("reconciling tallies"):
        counts = _votes_by_candidate()
        changed = {}
        for candidate in db.session.scalars(select(Candidate)):
            expected = counts.get(candidate.id, 0)
            if candidate.votes != expected:
                changed[candidate.id] = (candidate.votes, expected)
                candidate.votes = expected
        db.session.commit()

    if changed:
        current_app.logger.warning("Reconciled %d candidate tally(ies): %s", len(changed), changed)
        invalidate_views()
    else:
        current_app.logger.info("Tallies already consistent with voter registry")
    return changed


def tally_consistency() -> dict:
    """
    Compare the cached tallies with the registry. Votes pointing at deleted
    candidates are reported as ``orphaned_votes``.
    """
    with storage_errors("checking tally consistency"):
        tally_total = db.session.scalar(select(func.coalesce(func.sum(Candidate.votes), 0))) or 0
        voted_count = voter_registry.count_voted()
        counts = _votes_by_candidate()
        candidate_ids = set(db.session.scalars(select(Candidate.id)))

    orphaned = sum(n for cid, n in counts.items() if cid not in candidate_ids)
    return {
        "tally_total": int(tally_total),
        "voted_count": int(voted_count),
        "orphaned_votes": orphaned,
        "consistent": int(tally_total) == int(voted_count) - orphaned,
    }
