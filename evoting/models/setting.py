from datetime import datetime
from ..extensions import db

class Setting(db.Model):
    __tablename__ = "settings"

    VOTING_OPEN = "votingOpen"
    SHOW_RESULTS = "showResults"
    VOTING_SESSION_ID = "votingSessionId"

    key = db.Column(db.String(64), primary_key=True)
    value = db.Column(db.JSON, nullable=True)  # bool or str depending on key

    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
