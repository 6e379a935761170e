"""
Base service class for common service functionality
"""
from sqlalchemy.orm import Session
from typing import Generic, TypeVar, Type, Optional
from leaddesk.database.models.base import Base
from leaddesk.utils.exceptions import NotFoundError

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(Generic[ModelType]):
    """
    Session-bound CRUD helpers shared by the category and lead services.
    `label` names the model in not-found messages.
    """

    label = "Record"

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get(self, id: int) -> Optional[ModelType]:
        return self.db.get(self.model, id)

    def get_or_404(self, id: int) -> ModelType:
        """Record by primary key, NotFoundError when missing"""
        db_obj = self.get(id)
        if db_obj is None:
            raise NotFoundError(f"{self.label} {id} not found")
        return db_obj

    def find_one_by(self, **filters) -> Optional[ModelType]:
        """Oldest record matching the column filters"""
        return self.db.query(self.model).filter_by(**filters).order_by(self.model.id).first()

    def create(self, **kwargs) -> ModelType:
        db_obj = self.model(**kwargs)
        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    def apply(self, db_obj: ModelType, **changes) -> ModelType:
        """Set attributes on a loaded record and commit"""
        for key, value in changes.items():
            setattr(db_obj, key, value)
        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj
