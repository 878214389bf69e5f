from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
import logging
from typing import Optional

from tinylink.db.Connection import database
from tinylink.RateLimitHelper import limit_encode_requests
from tinylink.schemas import LinkCreateRequest, LinkEnvelope, LinkResponse
from tinylink.services.link_service import LinkService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["links"])


def get_link_service(cache=Depends(database.get_cache)) -> LinkService:
    return LinkService(cache)


@router.post(
    "/encode",
    response_model=LinkEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(limit_encode_requests)],
)
def encode_endpoint(
    link_request: LinkCreateRequest,
    db: Session = Depends(database.get_db),
    service: LinkService = Depends(get_link_service),
):
    link = service.create_shortened_for(db, link_request.original_url)
    return LinkEnvelope(data=LinkResponse.from_link(link))


@router.get("/decode", response_model=LinkEnvelope)
def decode_endpoint(
    short_code: Optional[str] = Query(None),
    db: Session = Depends(database.get_db),
    service: LinkService = Depends(get_link_service),
):
    link = service.resolve(db, short_code or "")
    return LinkEnvelope(data=LinkResponse.from_link(link))


@router.get("/{short_code}", tags=["redirect"])
def redirect_endpoint(
    short_code: str,
    db: Session = Depends(database.get_db),
    service: LinkService = Depends(get_link_service),
):
    link = service.resolve(db, short_code)
    logger.info(f"Redirect {short_code} -> {link.original_url[:50]}")
    return RedirectResponse(url=link.original_url, status_code=status.HTTP_301_MOVED_PERMANENTLY)
