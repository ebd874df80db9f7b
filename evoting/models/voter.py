import uuid
from datetime import datetime
from sqlalchemy import Uuid
from ..extensions import db

class Voter(db.Model):
    __tablename__ = "voters"

    id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Admin-issued token or device-generated identifier
    identifier = db.Column(db.String(255), nullable=False, unique=True, index=True)

    has_voted = db.Column(db.Boolean, nullable=False, default=False)
    voted_at = db.Column(db.DateTime, nullable=True)
    # No FK: deleting a candidate leaves voter rows untouched
    voted_candidate_id = db.Column(Uuid(as_uuid=True), nullable=True, index=True)
    session_id = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<Voter {self.identifier!r} has_voted={self.has_voted}>"
