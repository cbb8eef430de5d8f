# ecovive/services/catalog.py
"""
Category Catalog

Static lookup table from report category to display metadata and base
eco-point value. Built once at import time and never mutated.
"""

from types import MappingProxyType
from typing import Dict, List, NamedTuple

from ecovive.models.report import ReportCategory
from ecovive.services.errors import ValidationError


class CategoryInfo(NamedTuple):
    title: str
    icon: str
    base_points: int
    description: str
    tips: str
    color: str


CATEGORY_CATALOG = MappingProxyType({
    ReportCategory.TRASH: CategoryInfo(
        title="Trash",
        icon="🗑️",
        base_points=10,
        description="Accumulated garbage, solid waste or debris in public spaces",
        tips="• Use proper trash bins\n• Reduce single-use plastics\n• Join community clean-ups",
        color="#FF9800",
    ),
    ReportCategory.POLLUTION: CategoryInfo(
        title="Pollution",
        icon="💨",
        base_points=15,
        description="General pollution of the environment",
        tips="• Use public transport or a bicycle\n• Never burn garbage\n• Report illegal emissions",
        color="#9C27B0",
    ),
    ReportCategory.DEFORESTATION: CategoryInfo(
        title="Deforestation",
        icon="🌳",
        base_points=20,
        description="Illegal logging or destruction of green areas",
        tips="• Plant native trees\n• Report illegal logging\n• Support reforestation projects",
        color="#8BC34A",
    ),
    ReportCategory.WATER_POLLUTION: CategoryInfo(
        title="Water Pollution",
        icon="💧",
        base_points=25,
        description="Pollution of rivers, lakes, beaches or water sources",
        tips="• Never dump waste into water\n• Prefer biodegradable products\n• Report chemical spills",
        color="#2196F3",
    ),
    ReportCategory.AIR_POLLUTION: CategoryInfo(
        title="Air Pollution",
        icon="🌫️",
        base_points=20,
        description="Polluting emissions, smoke or foul odors",
        tips="• Keep your vehicle well maintained\n• Use renewable energy\n• Avoid unnecessary bonfires",
        color="#607D8B",
    ),
    ReportCategory.WILDLIFE: CategoryInfo(
        title="Wildlife",
        icon="🦋",
        base_points=30,
        description="Problems affecting local wildlife",
        tips="• Do not feed wild animals\n• Respect natural habitats\n• Report illegal activities",
        color="#4CAF50",
    ),
    ReportCategory.NOISE: CategoryInfo(
        title="Noise Pollution",
        icon="🔊",
        base_points=15,
        description="Excessive noise pollution",
        tips="• Respect quiet hours\n• Use headphones in public spaces\n• Keep the volume moderate",
        color="#FF5722",
    ),
    ReportCategory.SOIL: CategoryInfo(
        title="Soil Pollution",
        icon="🌍",
        base_points=18,
        description="Contamination of soil or land",
        tips="• Avoid excessive use of chemicals\n• Practice sustainable farming\n• Report illegal dumping",
        color="#795548",
    ),
    ReportCategory.ANIMAL: CategoryInfo(
        title="Animal Abuse",
        icon="🐾",
        base_points=25,
        description="Abuse or abandonment of animals",
        tips="• Adopt, don't shop\n• Spay and neuter your pets\n• Report cases of abuse",
        color="#E91E63",
    ),
    ReportCategory.OTHER: CategoryInfo(
        title="Other",
        icon="📝",
        base_points=5,
        description="Other environmental problems not covered above",
        tips="• Stay informed about local issues\n• Join community initiatives\n• Report anything you notice",
        color="#9E9E9E",
    ),
})


def metadata(category: ReportCategory) -> CategoryInfo:
    return CATEGORY_CATALOG[category]


def base_points(category: ReportCategory) -> int:
    return CATEGORY_CATALOG[category].base_points


def parse_category(name) -> ReportCategory:
    """
    Translate an external category name into the closed enum.

    Matching ignores case and accepts "-" or spaces in place of "_".
    Unknown names are a client input error.
    """
    if isinstance(name, ReportCategory):
        return name
    normalized = str(name or "").strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return ReportCategory(normalized)
    except ValueError:
        raise ValidationError(f"Unknown report category: {name!r}") from None


def list_categories() -> List[Dict]:
    return [
        {"category": category.value, **info._asdict()}
        for category, info in CATEGORY_CATALOG.items()
    ]
