from .candidate import Candidate  # noqa: F401
from .voter import Voter  # noqa: F401
from .setting import Setting  # noqa: F401
from .revoked_token import RevokedToken  # noqa: F401

# Import ALL models so SQLAlchemy registers them

__all__ = [
    "Candidate",
    "Voter",
    "Setting",
    "RevokedToken",
]
