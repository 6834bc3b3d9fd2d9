from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from moodlift.schemas import SeoMetadataResponse
from moodlift.services import seo_service
from moodlift.store import RowStore, get_store
from moodlift.structured_data import render_structured_data

router = APIRouter()


@router.get("/v1/seo", response_model=SeoMetadataResponse)
async def get_seo(page_url: str = Query(...), store: RowStore = Depends(get_store)):
    try:
        record = await seo_service.get_seo_metadata(store, page_url)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if record is None:
        raise HTTPException(status_code=404, detail="No SEO metadata for this page")
    structured = record.get("structured_data")
    record["structured_data_html"] = render_structured_data(structured) if structured else None
    return record
