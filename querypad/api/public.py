"""Unauthenticated read of shared queries."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from querypad.core.database import get_query_store
from querypad.schemas.query import PublicQueryView
from querypad.stores import QueryStore

router = APIRouter()


@router.get("/queries/{share_id}", response_model=PublicQueryView)
def get_shared_query(
    share_id: str,
    store: Annotated[QueryStore, Depends(get_query_store)],
) -> PublicQueryView:
    """Title, text, tags and creation time of a shared query; 404 for unknown or private."""
    view = store.get_public_by_share_id(share_id)
    if view is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shared query not found.",
        )
    return view
