"""Owner-scoped query endpoints: list, tags, create, update, delete, share."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from querypad.api.auth import get_current_user
from querypad.core.database import get_query_store
from querypad.core.errors import QueryNotFoundError, QueryValidationError
from querypad.schemas.auth import MessageResponse, SessionIdentity
from querypad.schemas.query import QueryOut, QueryWrite, ShareResponse
from querypad.stores import QueryStore

router = APIRouter()

Store = Annotated[QueryStore, Depends(get_query_store)]
CurrentUser = Annotated[SessionIdentity, Depends(get_current_user)]


async def read_query_body(request: Request, user: CurrentUser) -> QueryWrite:
    """Body of POST/PUT /queries, read only after the bearer token is accepted."""
    try:
        return QueryWrite.model_validate(await request.json())
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid request body."
        ) from e


Body = Annotated[QueryWrite, Depends(read_query_body)]


def _not_found(e: QueryNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


def _bad_request(e: QueryValidationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("/queries", response_model=list[QueryOut])
def list_queries(user: CurrentUser, store: Store) -> list[QueryOut]:
    """All queries of the caller, newest first."""
    return [QueryOut.from_record(r) for r in store.list_by_owner(user.user_id)]


@router.get("/tags", response_model=list[str])
def list_tags(user: CurrentUser, store: Store) -> list[str]:
    """Distinct tags across the caller's queries, sorted."""
    return store.list_tags(user.user_id)


@router.post("/queries", response_model=QueryOut, status_code=status.HTTP_201_CREATED)
def create_query(body: Body, user: CurrentUser, store: Store) -> QueryOut:
    """Save a new private query. Tags are trimmed, lowercased and de-duplicated."""
    try:
        record = store.create(user.user_id, body.title, body.text, body.tags)
    except QueryValidationError as e:
        raise _bad_request(e) from e
    return QueryOut.from_record(record)


@router.put("/queries/{query_id}", response_model=QueryOut)
def update_query(
    query_id: str, body: Body, user: CurrentUser, store: Store
) -> QueryOut:
    """Replace title, text and tags of one of the caller's queries."""
    try:
        record = store.update(user.user_id, query_id, body.title, body.text, body.tags)
    except QueryValidationError as e:
        raise _bad_request(e) from e
    except QueryNotFoundError as e:
        raise _not_found(e) from e
    return QueryOut.from_record(record)


@router.delete("/queries/{query_id}", response_model=MessageResponse)
def delete_query(query_id: str, user: CurrentUser, store: Store) -> MessageResponse:
    try:
        store.delete(user.user_id, query_id)
    except QueryNotFoundError as e:
        raise _not_found(e) from e
    return MessageResponse(message="Query deleted successfully.")


@router.post("/queries/{query_id}/share", response_model=ShareResponse)
def share_query(query_id: str, user: CurrentUser, store: Store) -> ShareResponse:
    """
    Make a query public and return its share id.

    Calling this again returns the same share id.
    """
    try:
        share_id = store.share(user.user_id, query_id)
    except QueryNotFoundError as e:
        raise _not_found(e) from e
    return ShareResponse(share_id=share_id)
