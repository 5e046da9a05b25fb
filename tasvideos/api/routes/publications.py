from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tasvideos.core.settings import get_app_settings
from tasvideos.db.session import get_async_session
from tasvideos.repositories.publications import PublicationRepository
from tasvideos.repositories.querying import invalid_sort_fields, resolve_sort, select_fields, split_csv
from tasvideos.schemas.common import MAX_PAGE_SIZE, ErrorResponse
from tasvideos.schemas.publications import PublicationRead, PublicationsRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/publications", tags=["Publications"])

# Ids are 32-bit integer columns.
MAX_ID = 2**31 - 1
MIN_YEAR, MAX_YEAR = 1, 9999

_ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "The request parameters are invalid"},
    500: {"model": ErrorResponse, "description": "An unexpected error occurred"},
}


def _parse_ids(param: str, value: Optional[str]) -> List[int]:
    try:
        ids = [int(part) for part in split_csv(value)]
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={param: [f"Invalid {param} parameter: expected comma-separated integers"]},
        )
    out_of_range = [i for i in ids if not 1 <= i <= MAX_ID]
    if out_of_range:
        messages = [f"Invalid {param} parameter: {i} is not between 1 and {MAX_ID}" for i in out_of_range]
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={param: messages})
    return ids


# PUBLIC_INTERFACE
def get_publications_request(
    sort: Optional[str] = Query(None, description="Comma-separated fields; prefix with '-' for descending"),
    limit: int = Query(MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Max number of records to return"),
    offset: int = Query(0, ge=0, le=MAX_ID, description="Number of records to skip"),
    fields: Optional[str] = Query(None, description="Comma-separated response fields to return"),
    systems: Optional[str] = Query(None, description="Comma-separated system codes"),
    class_names: Optional[str] = Query(None, alias="classNames", description="Comma-separated class names"),
    start_year: Optional[int] = Query(
        None, alias="startYear", ge=MIN_YEAR, le=MAX_YEAR, description="Earliest publication year"
    ),
    end_year: Optional[int] = Query(
        None, alias="endYear", ge=MIN_YEAR, le=MAX_YEAR, description="Latest publication year"
    ),
    genre_names: Optional[str] = Query(None, alias="genreNames", description="Comma-separated genre names"),
    flag_names: Optional[str] = Query(None, alias="flagNames", description="Comma-separated flag tokens"),
    author_ids: Optional[str] = Query(None, alias="authorIds", description="Comma-separated author user ids"),
    game_ids: Optional[str] = Query(None, alias="gameIds", description="Comma-separated game ids"),
    show_obsoleted: bool = Query(False, alias="showObsoleted", description="Include obsoleted publications"),
    only_obsoleted: bool = Query(False, alias="onlyObsoleted", description="Return only obsoleted publications"),
) -> PublicationsRequest:
    """Collect the list query parameters into a PublicationsRequest."""
    return PublicationsRequest(
        sort=sort,
        limit=limit,
        offset=offset,
        fields=fields,
        systems=split_csv(systems),
        class_names=split_csv(class_names),
        start_year=start_year,
        end_year=end_year,
        genre_names=split_csv(genre_names),
        flag_names=split_csv(flag_names),
        author_ids=_parse_ids("authorIds", author_ids),
        game_ids=_parse_ids("gameIds", game_ids),
        show_obsoleted=show_obsoleted,
        only_obsoleted=only_obsoleted,
    )


# PUBLIC_INTERFACE
@router.get(
    "/{publication_id}",
    response_model=PublicationRead,
    response_model_by_alias=True,
    summary="Get publication",
    description="Returns a publication with the given id.",
    responses={
        **_ERROR_RESPONSES,
        404: {"model": ErrorResponse, "description": "A publication with the given id was not found"},
    },
)
async def get_publication(
    publication_id: int = Path(..., ge=1, le=MAX_ID, description="Publication ID"),
    session: AsyncSession = Depends(get_async_session),
) -> PublicationRead:
    repo = PublicationRepository(session)
    pub = await repo.get_publication(publication_id)
    if not pub:
        raise HTTPException(status_code=404, detail="Publication not found")
    return PublicationRead.from_publication(pub)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[Dict[str, Any]],
    summary="List publications",
    description=(
        "Returns a list of publications, filtered by the given criteria, "
        "sorted by the requested fields and paged by limit/offset."
    ),
    responses={
        **_ERROR_RESPONSES,
        200: {"model": List[PublicationRead], "description": "Returns the list of publications"},
    },
)
async def list_publications(
    request: PublicationsRequest = Depends(get_publications_request),
    session: AsyncSession = Depends(get_async_session),
) -> List[Dict[str, Any]]:
    """
    List publications.

    Steps, in order: token filtering, projection to PublicationRead, sorting, paging.
    Sorting by a field that is not a scalar field of PublicationRead is rejected.
    """
    bad = invalid_sort_fields(request.sort, PublicationRead)
    if bad:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"sort": [f"Invalid Sort parameter: {name!r}" for name in bad]},
        )

    repo = PublicationRepository(session)
    pubs = await repo.list_publications(request, resolve_sort(request.sort, PublicationRead))
    records = [PublicationRead.from_publication(p).model_dump(mode="json", by_alias=True) for p in pubs]

    if get_app_settings().API_FIELD_SELECTION_ENABLED:
        return select_fields(records, request.fields)
    return records
