"""
Product feed endpoints
Serves the Google Merchant Center feed fetched on a schedule by Google
"""
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse

from shopfeed.api.deps import FeedServiceDep
from shopfeed.schemas.feed import FeedSummary

FEED_FILENAME = "google-products.tsv"
FEED_MEDIA_TYPE = "text/tab-separated-values; charset=utf-8"

router = APIRouter()


@router.get(f"/{FEED_FILENAME}", response_class=PlainTextResponse)
async def google_products_feed(
    feed_service: FeedServiceDep,
    default_brand: Optional[str] = Query(None, description="Override the fallback brand"),
) -> PlainTextResponse:
    """Google Merchant Center product feed as tab-separated values"""
    content = feed_service.generate_feed(default_brand=default_brand)

    return PlainTextResponse(
        content,
        media_type=FEED_MEDIA_TYPE,
        headers={"Content-Disposition": f'inline; filename="{FEED_FILENAME}"'},
    )


@router.get("/summary", response_model=FeedSummary)
async def feed_summary(feed_service: FeedServiceDep) -> FeedSummary:
    """Counts for each stage of the feed pipeline"""
    return feed_service.summary()
