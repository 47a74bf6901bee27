"""Content brief API endpoints."""

import logging

from fastapi import APIRouter, HTTPException, status

from briefsync.api.v1.briefs.constants import CONTENT_BRIEF_NOT_FOUND_DETAIL
from briefsync.api.v1.dependencies import BriefStoreDep
from briefsync.core.exceptions import ContentBriefNotFoundError
from briefsync.schemas.brief import (
    BriefDetailResponse,
    BriefRepairResponse,
    NormalizeBriefRequest,
    NormalizedBriefResponse,
)
from briefsync.services.briefs.parser import parse
from briefsync.services.briefs.reconciler import reconcile
from briefsync.services.briefs.repair import normalize_record, repair_brief
from briefsync.services.briefs.serializer import serialize_to_object

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/normalize",
    response_model=NormalizedBriefResponse,
    summary="Normalize a raw brief",
    description="Parse any historical brief encoding and return canonical sections.",
)
async def normalize_brief(request: NormalizeBriefRequest) -> NormalizedBriefResponse:
    document = reconcile(
        parse(request.raw, request.possible_article_titles, request.internal_links)
    )
    return NormalizedBriefResponse(
        source_format=document.source_format,
        sections=document.to_dict(),
        canonical=serialize_to_object(document),
    )


@router.get("/{brief_id}", response_model=BriefDetailResponse)
async def get_brief(brief_id: str, store: BriefStoreDep) -> BriefDetailResponse:
    """Load a stored brief and return its normalized view."""
    try:
        record = await store.load_document(brief_id)
    except ContentBriefNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=CONTENT_BRIEF_NOT_FOUND_DETAIL,
        ) from None

    document = normalize_record(record)
    return BriefDetailResponse(
        brief_id=brief_id,
        source_format=document.source_format,
        sections=document.to_dict(),
        canonical=serialize_to_object(document),
    )


@router.post("/{brief_id}/repair", response_model=BriefRepairResponse)
async def repair_stored_brief(
    brief_id: str,
    store: BriefStoreDep,
    dry_run: bool = False,
) -> BriefRepairResponse:
    """Rewrite a stored brief in the canonical numbered encoding."""
    try:
        result = await repair_brief(store, brief_id, dry_run=dry_run)
    except ContentBriefNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=CONTENT_BRIEF_NOT_FOUND_DETAIL,
        ) from None

    return BriefRepairResponse(
        brief_id=result.brief_id,
        source_format=result.source_format,
        changed=result.changed,
        saved=result.saved,
    )
