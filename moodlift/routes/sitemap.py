from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from moodlift.sitemap import generate_sitemap, render_sitemap_xml
from moodlift.store import RowStore, get_store

router = APIRouter()


@router.get("/sitemap.xml")
async def sitemap_xml(store: RowStore = Depends(get_store)):
    entries = await generate_sitemap(store)
    return Response(content=render_sitemap_xml(entries), media_type="application/xml")


@router.get("/v1/sitemap")
async def sitemap_json(store: RowStore = Depends(get_store)):
    return {"items": await generate_sitemap(store)}
