from models.base_model import Base, BaseModel
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship


class User(BaseModel, Base):
    __tablename__ = "users"
    name = Column(String(100), nullable=False)
    # Stored exactly as registered; lookups are case-sensitive
    email = Column(String(256), nullable=False, unique=True, index=True)
    password_hash = Column(String(200), nullable=False)

    todo_items = relationship(
        "ToDoItem",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
