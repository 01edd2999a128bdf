from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from waitlist.auth.context import AuthContext
from waitlist.core.database import get_db
from waitlist.dependencies.auth import get_auth_context, get_current_organizer
from waitlist.models.organizer import Organizer
from waitlist.models.participant import WaitlistParticipant
from waitlist.models.service import Service
from waitlist.schemas.auth import MessageOut
from waitlist.schemas.service import ParticipantOut, ServiceCreate, ServiceOut, ServiceUpdate
from waitlist.services.waitlists import (
    create_service,
    delete_service,
    get_service_for_organizer,
    participant_count,
    participant_counts,
    update_service,
)

router = APIRouter(prefix="/services", tags=["services"], dependencies=[Depends(get_auth_context)])


def _service_out(service: Service, count: int) -> ServiceOut:
    out = ServiceOut.model_validate(service)
    out.participant_count = count
    return out


@router.get("/", response_model=list[ServiceOut])
def list_services(db: Session = Depends(get_db), ctx: AuthContext = Depends(get_auth_context)):
    services = (
        db.query(Service)
        .filter(Service.organizer_id == ctx.organizer_id)
        .order_by(desc(Service.created_at), desc(Service.id))
        .all()
    )
    counts = participant_counts(db, [s.id for s in services])
    return [_service_out(s, counts.get(s.id, 0)) for s in services]


@router.post("/", response_model=ServiceOut, status_code=status.HTTP_201_CREATED)
def create(
    payload: ServiceCreate,
    db: Session = Depends(get_db),
    organizer: Organizer = Depends(get_current_organizer),
):
    # The owner row must still exist; a stale session must not reach the slug write.
    service = create_service(db, organizer.id, payload.model_dump())
    return _service_out(service, 0)


@router.get("/{service_id}", response_model=ServiceOut)
def get_service(service_id: int, db: Session = Depends(get_db), ctx: AuthContext = Depends(get_auth_context)):
    service = get_service_for_organizer(db, service_id, ctx.organizer_id)
    return _service_out(service, participant_count(db, service.id))


@router.patch("/{service_id}", response_model=ServiceOut)
def patch_service(
    service_id: int,
    payload: ServiceUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    service = get_service_for_organizer(db, service_id, ctx.organizer_id)

    data = payload.model_dump(exclude_unset=True)
    if data:
        service = update_service(db, service, data)
    return _service_out(service, participant_count(db, service.id))


@router.delete("/{service_id}", response_model=MessageOut)
def remove_service(service_id: int, db: Session = Depends(get_db), ctx: AuthContext = Depends(get_auth_context)):
    service = get_service_for_organizer(db, service_id, ctx.organizer_id)
    delete_service(db, service)
    return {"message": "Service deleted"}


@router.get("/{service_id}/participants", response_model=list[ParticipantOut])
def list_participants(
    service_id: int,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    service = get_service_for_organizer(db, service_id, ctx.organizer_id)
    return (
        db.query(WaitlistParticipant)
        .filter(WaitlistParticipant.service_id == service.id)
        .order_by(WaitlistParticipant.joined_at, WaitlistParticipant.id)
        .all()
    )
