from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from waitlist.models.participant import WaitlistParticipant
from waitlist.models.service import Service

logger = logging.getLogger(__name__)


def get_service_for_organizer(db: Session, service_id: int, organizer_id: str) -> Service:
    service = (
        db.query(Service)
        .filter(Service.id == service_id, Service.organizer_id == organizer_id)
        .first()
    )
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


def get_service_by_slug(db: Session, slug: str) -> Service:
    service = db.query(Service).filter(Service.slug == slug).first()
    if not service:
        raise HTTPException(status_code=404, detail="Waitlist not found")
    return service


def participant_count(db: Session, service_id: int) -> int:
    return (
        db.query(func.count(WaitlistParticipant.id))
        .filter(WaitlistParticipant.service_id == service_id)
        .scalar()
        or 0
    )


def participant_counts(db: Session, service_ids: list[int]) -> dict[int, int]:
    if not service_ids:
        return {}
    rows = (
        db.query(WaitlistParticipant.service_id, func.count(WaitlistParticipant.id))
        .filter(WaitlistParticipant.service_id.in_(service_ids))
        .group_by(WaitlistParticipant.service_id)
        .all()
    )
    return {service_id: int(count) for service_id, count in rows}


def _normalize_fields(data: dict[str, Any]) -> dict[str, Any]:
    if data.get("launch_date") is not None:
        data["launch_date"] = data["launch_date"].isoformat()
    return data


def _is_slug_violation(exc: IntegrityError) -> bool:
    message = str(getattr(exc, "orig", None) or exc)
    return "services.slug" in message or "ix_services_slug" in message


def _commit_slug_write(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if not _is_slug_violation(exc):
            raise
        raise HTTPException(status_code=409, detail="A service with this slug already exists")


def create_service(db: Session, organizer_id: str, data: dict[str, Any]) -> Service:
    if db.query(Service.id).filter(Service.slug == data["slug"]).first():
        raise HTTPException(status_code=409, detail="A service with this slug already exists")

    service = Service(organizer_id=organizer_id, **_normalize_fields(data))
    db.add(service)
    _commit_slug_write(db)
    db.refresh(service)
    logger.info("Service created: id=%s organizer=%s slug=%s", service.id, organizer_id, service.slug)
    return service


def update_service(db: Session, service: Service, data: dict[str, Any]) -> Service:
    slug = data.get("slug")
    if slug and slug != service.slug:
        taken = db.query(Service.id).filter(Service.slug == slug, Service.id != service.id).first()
        if taken:
            raise HTTPException(status_code=409, detail="A service with this slug already exists")

    for key, value in _normalize_fields(data).items():
        if value is None and key in {"name", "slug", "screenshots", "rating"}:
            continue
        setattr(service, key, value)

    db.add(service)
    _commit_slug_write(db)
    db.refresh(service)
    return service


def delete_service(db: Session, service: Service) -> None:
    service_id, organizer_id = service.id, service.organizer_id
    # Participants go with the service (ORM cascade + FK ondelete).
    db.delete(service)
    db.commit()
    logger.info("Service deleted: id=%s organizer=%s", service_id, organizer_id)


def join_waitlist(db: Session, service: Service, email: str) -> WaitlistParticipant:
    exists = (
        db.query(WaitlistParticipant.id)
        .filter(WaitlistParticipant.service_id == service.id, WaitlistParticipant.email == email)
        .first()
    )
    if exists:
        raise HTTPException(status_code=409, detail="Email is already on this waitlist")

    participant = WaitlistParticipant(service_id=service.id, email=email)
    db.add(participant)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Email is already on this waitlist")
    db.refresh(participant)
    return participant
