# ABOUTME: Read-only feed routes: items, titles and categories.
# ABOUTME: Thin layer translating query parameters into store queries.

from typing import Annotated

from fastapi import APIRouter, Query

from esqimo.models import Item
from esqimo.web.dependencies import StoreDep

router = APIRouter(tags=["feeds"])


@router.get("/items", response_model=list[Item])
async def get_items(
    store: StoreDep,
    titles: Annotated[list[str] | None, Query()] = None,
    categories: Annotated[list[str] | None, Query()] = None,
    limit: Annotated[int, Query(ge=0)] = 0,
):
    """Items from the selected feeds and categories, most recent first.

    Repeat titles/categories to select several. Without categories, items
    that have no category are included; with them, pass an empty category to
    include uncategorised items.
    """
    return store.get_items(titles or (), categories or (), limit)


@router.get("/titles", response_model=list[str])
async def get_titles(store: StoreDep):
    """Titles of all aggregated feeds."""
    return sorted(store.get_titles())


@router.get("/categories", response_model=list[str])
async def get_categories(store: StoreDep):
    """Categories seen across all items."""
    return sorted(store.get_categories())
