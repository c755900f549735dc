"""
API Dependencies for dependency injection
"""
from typing import Annotated

from fastapi import Depends

from shopfeed.services.feed_service import FeedService, get_feed_service

FeedServiceDep = Annotated[FeedService, Depends(get_feed_service)]
