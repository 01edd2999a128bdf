from __future__ import annotations

from waitlist.models.service import Service


def _seed_service(db_session, organizer, **fields) -> Service:
    data = {"name": "Alpha", "slug": "alpha", "description": "First service"}
    data.update(fields)
    service = Service(organizer_id=organizer.id, **data)
    db_session.add(service)
    db_session.commit()
    db_session.refresh(service)
    return service


def test_waitlist_details_fall_back_to_service_fields(anon_client, organizers, db_session):
    org_a, _ = organizers
    _seed_service(db_session, org_a)

    res = anon_client.get("/public/waitlists/alpha")

    assert res.status_code == 200
    assert res.json() == {
        "title": "Alpha",
        "description": "First service",
        "background": "",
        "current_participants": 0,
    }


def test_waitlist_details_prefer_waitlist_fields(anon_client, organizers, db_session):
    org_a, _ = organizers
    _seed_service(
        db_session,
        org_a,
        waitlist_title="Join Alpha",
        waitlist_description="Be first in line",
        waitlist_background="#000000",
    )

    body = anon_client.get("/public/waitlists/alpha").json()

    assert body["title"] == "Join Alpha"
    assert body["description"] == "Be first in line"
    assert body["background"] == "#000000"


def test_unknown_waitlist_is_404(anon_client):
    for path in ("/public/waitlists/nope", "/public/waitlists/nope/count"):
        res = anon_client.get(path)
        assert res.status_code == 404
        assert res.json() == {"error": "NOT_FOUND", "message": "Waitlist not found"}

    res = anon_client.post("/public/waitlists/nope/join", json={"email": "p@example.com"})
    assert res.status_code == 404


def test_join_counts_and_rejects_duplicates(anon_client, organizers, db_session):
    org_a, _ = organizers
    _seed_service(db_session, org_a)

    res = anon_client.post("/public/waitlists/alpha/join", json={"email": "p1@example.com"})
    assert res.status_code == 201, res.text
    body = res.json()
    assert body["message"] == "Successfully joined the waitlist"
    assert isinstance(body["waitlist_entry_id"], int)

    res = anon_client.post("/public/waitlists/alpha/join", json={"email": "p1@example.com"})
    assert res.status_code == 409
    assert res.json()["error"] == "CONFLICT"

    anon_client.post("/public/waitlists/alpha/join", json={"email": "p2@example.com"})
    assert anon_client.get("/public/waitlists/alpha/count").json() == {"current_participants": 2}
    assert anon_client.get("/public/waitlists/alpha").json()["current_participants"] == 2


def test_same_email_can_join_different_waitlists(anon_client, organizers, db_session):
    org_a, org_b = organizers
    _seed_service(db_session, org_a, slug="alpha")
    _seed_service(db_session, org_b, name="Beta", slug="beta")

    for slug in ("alpha", "beta"):
        res = anon_client.post(f"/public/waitlists/{slug}/join", json={"email": "p@example.com"})
        assert res.status_code == 201


def test_join_requires_valid_email(anon_client, organizers, db_session):
    org_a, _ = organizers
    _seed_service(db_session, org_a)

    res = anon_client.post("/public/waitlists/alpha/join", json={"email": "nope"})
    assert res.status_code == 422


def test_public_services_lists_all_organizers_with_counts(anon_client, organizers, db_session):
    org_a, org_b = organizers
    _seed_service(db_session, org_a, slug="alpha", category="tools")
    _seed_service(db_session, org_b, name="Beta", slug="beta")
    anon_client.post("/public/waitlists/beta/join", json={"email": "p@example.com"})

    res = anon_client.get("/public/services")

    assert res.status_code == 200
    by_slug = {s["slug"]: s for s in res.json()}
    assert set(by_slug) == {"alpha", "beta"}
    assert by_slug["alpha"]["category"] == "tools"
    assert by_slug["alpha"]["participant_count"] == 0
    assert by_slug["beta"]["participant_count"] == 1
    assert "organizer_id" not in by_slug["alpha"]
