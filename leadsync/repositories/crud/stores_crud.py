"""CRUD helpers for the store directory."""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from leadsync.repositories.models.stores_model import Store
from leadsync.repositories.schemas.stores_schema import StoreCreate


class CRUDStore:
    """Database access for stores."""

    def get_by_code_or_name(
        self, db: Session, code: Optional[str], name: str
    ) -> Optional[Store]:
        if code:
            return (
                db.query(Store)
                .filter(or_(Store.code == code, Store.name == name))
                .first()
            )
        return db.query(Store).filter(Store.name == name).first()

    def create(self, db: Session, store_in: StoreCreate) -> Store:
        store = Store(**store_in.model_dump())
        db.add(store)
        db.commit()
        db.refresh(store)
        return store

    def list_syncable(self, db: Session) -> List[Store]:
        """Return active stores that carry an upstream location code."""
        return (
            db.query(Store)
            .filter(Store.is_active.is_(True), Store.code.isnot(None), Store.code != "")
            .order_by(Store.id.asc())
            .all()
        )

    def count(self, db: Session) -> int:
        return db.query(Store).count()
