"""Seed and draft API routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from draftflow.client.drafting import load_draft
from draftflow.core.exceptions import SeedNotFoundError
from draftflow.models.seed import DEFAULT_SEED_KEY, DraftView, SavedSeed, SeedRecord
from draftflow.services.seed_store import SeedStore, get_seed_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["seeds"])

SeedKey = Annotated[
    str,
    Query(pattern=r"^[A-Za-z0-9_.-]+$", description="Seed slot to use"),
]


@router.put("/seed", response_model=SeedRecord)
def save_seed(
    seed: SavedSeed,
    store: Annotated[SeedStore, Depends(get_seed_store)],
    key: SeedKey = DEFAULT_SEED_KEY,
) -> SeedRecord:
    """Save a gathering snapshot, replacing any previous one under ``key``."""
    return store.save(seed, key)


@router.get("/seed", response_model=SeedRecord)
def get_seed(
    store: Annotated[SeedStore, Depends(get_seed_store)],
    key: SeedKey = DEFAULT_SEED_KEY,
) -> SeedRecord:
    """Get the seed saved under ``key``."""
    seed = store.load(key)
    if seed is None:
        raise SeedNotFoundError(key)
    return SeedRecord(payload=seed)


@router.delete("/seed", status_code=status.HTTP_204_NO_CONTENT)
def delete_seed(
    store: Annotated[SeedStore, Depends(get_seed_store)],
    key: SeedKey = DEFAULT_SEED_KEY,
) -> Response:
    store.delete(key)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/draft", response_model=DraftView)
def get_draft(
    store: Annotated[SeedStore, Depends(get_seed_store)],
    key: SeedKey = DEFAULT_SEED_KEY,
) -> DraftView:
    """Initial drafting editor content built from the saved seed."""
    return load_draft(store, key)
