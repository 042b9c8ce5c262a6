from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from ..db import EventStore, StoreError
from ..services.event_svc import list_events

router = APIRouter()


class EventOut(BaseModel):
    id: str
    title: str
    date: str


def get_store(request: Request) -> EventStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="store_not_ready")
    return store


def get_group_id(request: Request) -> str:
    return request.app.state.group_id


@router.get("/title", response_model=list[EventOut])
def api_events_by_title(store: EventStore = Depends(get_store), group_id: str = Depends(get_group_id)):
    try:
        return list_events(store, group_id, "title")
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/date", response_model=list[EventOut])
def api_events_by_date(store: EventStore = Depends(get_store), group_id: str = Depends(get_group_id)):
    try:
        return list_events(store, group_id, "date")
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))
