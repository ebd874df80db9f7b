from datetime import datetime
from ..extensions import db

class RevokedToken(db.Model):
    """Admin access tokens invalidated by logout."""

    __tablename__ = "revoked_tokens"

    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(64), nullable=False, unique=True, index=True)
    revoked_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    @classmethod
    def revoke(cls, jti: str) -> "RevokedToken":
        token = cls(jti=jti)
        db.session.add(token)
        return token

    @classmethod
    def is_revoked(cls, jti: str) -> bool:
        return db.session.query(cls.id).filter_by(jti=jti).scalar() is not None
