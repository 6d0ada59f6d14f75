"""
User CRUD operations.
"""
from typing import Iterable, List
from sqlalchemy.orm import Session
from app.model.user import User
from app.crud.base import CRUDBase


class CRUDUser(CRUDBase[User, dict, dict]):
    """User-specific CRUD operations."""

    def list_by_emails(self, db: Session, emails: Iterable[str]) -> List[User]:
        """Users matching the given emails; unknown emails are skipped."""
        wanted = list(dict.fromkeys(emails))
        if not wanted:
            return []
        users = db.query(self.model).filter(self.model.email.in_(wanted)).all()
        # Keep request order
        by_email = {u.email: u for u in users}
        return [by_email[e] for e in wanted if e in by_email]


user_crud = CRUDUser(User)
