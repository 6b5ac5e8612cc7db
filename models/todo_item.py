from sqlalchemy import Column, String, Integer, ForeignKey, Index
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class ToDoItem(BaseModel, Base):
    __tablename__ = "todo_items"

    title = Column(String(100), nullable=False)
    description = Column(String(200), nullable=False)
    # Set once at creation; the update path never touches it
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    user = relationship("User", back_populates="todo_items")

    __table_args__ = (
        Index("ix_todo_items_user_id", "user_id"),
    )
