"""
RefreshToken model: stores issued opaque refresh tokens so they can be
revoked and rotated.
Fields:
- token (unique opaque string, the lookup key)
- user_id (Integer) - FK to users.id
- revoked (bool)
- created_at, expires_at (naive UTC)
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(600), nullable=False, unique=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    revoked = Column(Boolean, default=False, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    def is_usable(self, now) -> bool:
        """A token can be exchanged only while unrevoked and unexpired."""
        return not self.revoked and now < self.expires_at

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id} revoked={self.revoked}>"
