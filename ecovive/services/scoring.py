# ecovive/services/scoring.py
"""
Eco-points & Levels - Scoring Engine

Computes the points a new report is worth, credits points to reporters,
derives experience levels and unlocks rule-based achievements.
"""

import enum
import logging
from datetime import datetime
from typing import Callable, List, NamedTuple, Optional, Tuple

from sqlalchemy.orm import Session

from ecovive.config import settings
from ecovive.models.report import ReportCategory
from ecovive.models.user import Achievement, User
from ecovive.services import catalog
from ecovive.utils.clock import utcnow

logger = logging.getLogger(__name__)


# =====================================
# LEVELS
# =====================================

class Level(str, enum.Enum):
    EXPLORER = "Explorer"
    DEFENDER = "Defender"
    PROTECTOR = "Protector"
    GUARDIAN = "Guardian"


# Inclusive lower bounds, most senior first.
LEVEL_THRESHOLDS: Tuple[Tuple[int, Level], ...] = (
    (1000, Level.GUARDIAN),
    (500, Level.PROTECTOR),
    (100, Level.DEFENDER),
    (0, Level.EXPLORER),
)

LEVEL_ICONS = {
    Level.EXPLORER: "🌱",
    Level.DEFENDER: "🍃",
    Level.PROTECTOR: "🌿",
    Level.GUARDIAN: "🌎",
}


def level_for_points(points: int) -> Level:
    if points < 0:
        raise ValueError(f"Eco-points cannot be negative: {points}")
    for threshold, level in LEVEL_THRESHOLDS:
        if points >= threshold:
            return level
    return Level.EXPLORER


def describe_levels() -> List[dict]:
    return [
        {"level": level.value, "icon": LEVEL_ICONS[level], "min_points": threshold}
        for threshold, level in reversed(LEVEL_THRESHOLDS)
    ]


# =====================================
# POINTS
# =====================================

def points_for_new_report(
    category: ReportCategory,
    has_photo: bool,
    photo_bonus: Optional[int] = None,
) -> int:
    """Category base points plus a flat bonus when a photo is attached."""
    if photo_bonus is None:
        photo_bonus = settings.PHOTO_BONUS_POINTS
    return catalog.base_points(category) + (photo_bonus if has_photo else 0)


def credit_user(user: User, points: int) -> Tuple[Level, Level]:
    """
    Add eco-points to a user.

    Returns the (previous_level, new_level) pair so callers can react to
    promotions. Caller owns the commit.
    """
    if points < 0:
        raise ValueError("Eco-points credit must be non-negative")

    previous_level = level_for_points(user.eco_points or 0)
    user.eco_points = (user.eco_points or 0) + points
    new_level = level_for_points(user.eco_points)

    if new_level != previous_level:
        logger.info(
            "User %s promoted %s -> %s (%s points)",
            user.id,
            previous_level.value,
            new_level.value,
            user.eco_points,
        )
    return previous_level, new_level


def increment_reports_count(user: User) -> int:
    user.reports_count = (user.reports_count or 0) + 1
    return user.reports_count


# =====================================
# ACHIEVEMENTS
# =====================================

class AchievementRule(NamedTuple):
    code: str
    title: str
    description: str
    icon: str
    category: str
    points_reward: int
    predicate: Callable[[User], bool]


def _level_at_least(level: Level) -> Callable[[User], bool]:
    order = [lvl for _, lvl in reversed(LEVEL_THRESHOLDS)]
    return lambda user: order.index(user.level) >= order.index(level)


ACHIEVEMENT_RULES: Tuple[AchievementRule, ...] = (
    AchievementRule(
        "first_report", "First Report", "Filed your first environmental report",
        "📣", "reports", 0, lambda user: (user.reports_count or 0) >= 1,
    ),
    AchievementRule(
        "ten_reports", "Watchful Neighbor", "Filed 10 environmental reports",
        "🔭", "reports", 0, lambda user: (user.reports_count or 0) >= 10,
    ),
    AchievementRule(
        "fifty_reports", "Community Sentinel", "Filed 50 environmental reports",
        "🏅", "reports", 0, lambda user: (user.reports_count or 0) >= 50,
    ),
    AchievementRule(
        "level_defender", "Defender", "Reached the Defender level",
        LEVEL_ICONS[Level.DEFENDER], "level", 0, _level_at_least(Level.DEFENDER),
    ),
    AchievementRule(
        "level_protector", "Protector", "Reached the Protector level",
        LEVEL_ICONS[Level.PROTECTOR], "level", 0, _level_at_least(Level.PROTECTOR),
    ),
    AchievementRule(
        "level_guardian", "Guardian", "Reached the Guardian level",
        LEVEL_ICONS[Level.GUARDIAN], "level", 0, _level_at_least(Level.GUARDIAN),
    ),
)


def evaluate_achievements(
    db: Session,
    user: User,
    now: Optional[datetime] = None,
) -> List[Achievement]:
    """
    Unlock every rule the user now satisfies but does not hold yet.

    Achievements are informational: points_reward is recorded but never
    credited. New rows are added to the session; caller owns the commit.
    """
    held = {
        code
        for (code,) in db.query(Achievement.code).filter(Achievement.user_id == user.id).all()
    }
    unlocked = []
    for rule in ACHIEVEMENT_RULES:
        if rule.code in held or not rule.predicate(user):
            continue
        achievement = Achievement(
            user_id=user.id,
            code=rule.code,
            title=rule.title,
            description=rule.description,
            icon=rule.icon,
            category=rule.category,
            points_reward=rule.points_reward,
            unlocked_at=now or utcnow(),
        )
        db.add(achievement)
        unlocked.append(achievement)
        logger.info("User %s unlocked achievement %s", user.id, rule.code)
    return unlocked
