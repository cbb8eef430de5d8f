from sqlalchemy import (
    Column, Integer, String, Text, Boolean, ForeignKey, TIMESTAMP, UniqueConstraint,
)
from ecovive.database import Base
from ecovive.utils.clock import utcnow


# ---------------- USER ----------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    location = Column(String(150), default="Ventanilla, Callao")
    eco_points = Column(Integer, nullable=False, default=0)
    reports_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True)
    email_verified = Column(Boolean, default=False)
    created_at = Column(TIMESTAMP, default=utcnow, nullable=False)
    updated_at = Column(TIMESTAMP, default=utcnow, onupdate=utcnow)

    # Reports and achievements are stored keyed by user_id and removed by
    # user_service.delete_user.

    @property
    def level(self):
        # Derived from eco_points on every read so it can never drift.
        from ecovive.services.scoring import level_for_points
        return level_for_points(self.eco_points or 0)

    def __repr__(self):
        return f"<User id={self.id} eco_points={self.eco_points} level={self.level.value}>"


# ---------------- ACHIEVEMENTS ----------------
class Achievement(Base):
    __tablename__ = "achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "code", name="uq_achievements_user_code"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    code = Column(String(50), nullable=False)
    title = Column(String(100), nullable=False)
    description = Column(Text)
    icon = Column(String(16), default="🏆")
    category = Column(String(30))
    points_reward = Column(Integer, nullable=False, default=0)
    unlocked_at = Column(TIMESTAMP, default=utcnow, nullable=False)
