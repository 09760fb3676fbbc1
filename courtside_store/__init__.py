from .auth import Session, SessionProvider
from .db import Database

__all__ = ["Database", "Session", "SessionProvider"]
