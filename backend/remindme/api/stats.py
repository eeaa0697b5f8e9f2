"""
Tag usage and reminder statistics.
"""
from typing import List

from fastapi import APIRouter, Depends

from remindme.core.repository import Repository
from remindme.schemas.common import StatsResponse, TagCount
from remindme.store import get_repository

router = APIRouter()


@router.get("/tags", response_model=List[TagCount])
async def list_tags(repo: Repository = Depends(get_repository)):
    """Tags in use, most used first."""
    return [TagCount(tag=tag, count=count) for tag, count in repo.tag_counts()]


@router.get("/stats", response_model=StatsResponse)
async def get_stats(repo: Repository = Depends(get_repository)):
    """Counts for the dashboard."""
    return StatsResponse(**repo.stats())
