import uuid
from datetime import datetime
from sqlalchemy import Uuid
from ..extensions import db

class Candidate(db.Model):
    __tablename__ = "candidates"

    id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Ballot order, unique across candidates
    number = db.Column(db.Integer, nullable=False, unique=True, index=True)
    name = db.Column(db.String(200), nullable=False)
    class_name = db.Column(db.String(100), nullable=False)
    vision = db.Column(db.Text, nullable=False)
    mission = db.Column(db.Text, nullable=False)
    photo_url = db.Column(db.Text, nullable=True)  # data URI

    # Cached tally; the voter registry is the source of truth
    votes = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Candidate {self.number} {self.name!r} votes={self.votes}>"
