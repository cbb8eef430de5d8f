from fastapi import APIRouter

from ecovive.services import catalog, scoring, status_machine

router = APIRouter(prefix="/catalog", tags=["Catalog"])


@router.get("/categories")
def get_categories():
    """Report categories with their display metadata and base eco-points."""
    return catalog.list_categories()


@router.get("/statuses")
def get_statuses():
    """Report statuses with the transitions each one allows."""
    return status_machine.describe_statuses()


@router.get("/levels")
def get_levels():
    return scoring.describe_levels()
