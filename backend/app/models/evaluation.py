import enum
import json
import uuid
from typing import Any, Dict

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from ..platform.database import Base
from ..shared.utils import utcnow


class EvaluationType(str, enum.Enum):
    INITIAL = "INITIAL"
    ADVANCED = "ADVANCED"


DEFAULT_TITLES = {
    EvaluationType.INITIAL: "Initial Evaluation",
    EvaluationType.ADVANCED: "Advanced Evaluation",
}

TITLE_MAX_LENGTH = 200
GUEST_EMAIL_MAX_LENGTH = 320


class Evaluation(Base):
    __tablename__ = "evaluations"
    __table_args__ = (
        # Exactly one owner: a guest email or a profile.
        CheckConstraint(
            "(guest_email IS NOT NULL AND profile_id IS NULL) OR "
            "(guest_email IS NULL AND profile_id IS NOT NULL)",
            name="ck_evaluations_single_owner",
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type = Column(Enum(EvaluationType), nullable=False)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    answers = Column(Text, nullable=False)  # JSON-serialized {question_id: value}
    score = Column(Integer, nullable=False)
    access_code = Column(String(32), unique=True, index=True)
    guest_email = Column(String(GUEST_EMAIL_MAX_LENGTH), index=True)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), index=True)
    # "metadata" is reserved on declarative classes
    extra_metadata = Column("metadata", JSON)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    # Reserved: no write path sets this yet.
    completed_at = Column(DateTime(timezone=True))

    profile = relationship("Profile", back_populates="evaluations")

    @property
    def answers_dict(self) -> Dict[str, int]:
        try:
            parsed = json.loads(self.answers or "{}")
        except (TypeError, ValueError):
            return {}
        return parsed if isinstance(parsed, dict) else {}

    @property
    def interest(self) -> Dict[str, Any] | None:
        meta = self.extra_metadata or {}
        return meta.get("interest") if isinstance(meta, dict) else None
