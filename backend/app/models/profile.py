import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..platform.database import Base
from ..shared.utils import utcnow


class UserRole(str, enum.Enum):
    FREE = "FREE"
    PREMIUM = "PREMIUM"
    SUPERADMIN = "SUPERADMIN"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.FREE)
    first_name = Column(String(120))
    last_name = Column(String(120))
    company = Column(String(200))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="profile")
    evaluations = relationship("Evaluation", back_populates="profile")
