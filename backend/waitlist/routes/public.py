from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from waitlist.core.database import get_db
from waitlist.core.rate_limit import maybe_limit
from waitlist.models.service import Service
from waitlist.schemas.service import (
    JoinWaitlistIn,
    JoinWaitlistOut,
    ParticipantCountOut,
    PublicServiceOut,
    WaitlistDetailsOut,
)
from waitlist.services.waitlists import (
    get_service_by_slug,
    join_waitlist,
    participant_count,
    participant_counts,
)

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/services", response_model=list[PublicServiceOut])
def list_public_services(db: Session = Depends(get_db)):
    services = db.query(Service).order_by(desc(Service.created_at), desc(Service.id)).all()
    counts = participant_counts(db, [s.id for s in services])
    return [
        PublicServiceOut(
            id=s.id,
            name=s.name,
            description=s.description,
            slug=s.slug,
            image=s.image,
            category=s.category,
            participant_count=counts.get(s.id, 0),
        )
        for s in services
    ]


@router.get("/waitlists/{slug}", response_model=WaitlistDetailsOut)
def get_waitlist(slug: str, db: Session = Depends(get_db)):
    service = get_service_by_slug(db, slug)
    return {
        "title": service.waitlist_title or service.name,
        "description": service.waitlist_description or service.description or "",
        "background": service.waitlist_background or "",
        "current_participants": participant_count(db, service.id),
    }


@router.post("/waitlists/{slug}/join", response_model=JoinWaitlistOut, status_code=status.HTTP_201_CREATED)
@maybe_limit("20/minute")
def join(request: Request, slug: str, payload: JoinWaitlistIn, db: Session = Depends(get_db)):
    service = get_service_by_slug(db, slug)
    participant = join_waitlist(db, service, payload.email)
    return {"message": "Successfully joined the waitlist", "waitlist_entry_id": participant.id}


@router.get("/waitlists/{slug}/count", response_model=ParticipantCountOut)
def get_count(slug: str, db: Session = Depends(get_db)):
    service = get_service_by_slug(db, slug)
    return {"current_participants": participant_count(db, service.id)}
