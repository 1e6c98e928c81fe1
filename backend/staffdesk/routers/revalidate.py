"""Stale-view polling for the UI."""

from datetime import datetime, timezone
from fastapi import APIRouter, Query
from typing import Optional

from staffdesk.services.revalidation import stale_paths

router = APIRouter(prefix="/api/v1/revalidate", tags=["Revalidate"])


@router.get("/")
def list_stale_paths(since: Optional[datetime] = Query(None)):
    # naive timestamps are taken as UTC
    if since is not None:
        if since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        since = since.astimezone(timezone.utc)
    return {"paths": stale_paths(since)}
