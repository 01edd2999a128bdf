from __future__ import annotations

import itertools

import pytest

from waitlist.auth.errors import (
    AlreadyLinked,
    InvalidToken,
    LastMethodRemaining,
    NotFound,
    NotLinked,
    ProviderTaken,
)
from waitlist.auth.providers import ProviderIdentity
from waitlist.services import identity, provider_links
from waitlist.services.credential_store import CredentialStore


def test_social_only_organizer_cannot_unlink_last_provider(db_session):
    org = identity.resolve_social_identity(db_session, ProviderIdentity("google", "g1", "b@example.com"))

    with pytest.raises(LastMethodRemaining):
        provider_links.unlink_provider(db_session, org.id, "google")

    assert provider_links.auth_methods(org) == ["google"]


def test_link_then_second_organizer_gets_provider_taken(db_session, fake_providers):
    fake_providers.add_github("htok", github_id=1, email="x@example.com")
    x = identity.signup(db_session, "x@example.com", "pw1")
    y = identity.signup(db_session, "y@example.com", "pw2")

    provider_links.link_provider(db_session, x.id, "github", "htok")

    with pytest.raises(ProviderTaken):
        provider_links.link_provider(db_session, y.id, "github", "htok")

    assert [p.provider_id for p in x.social_providers] == ["1"]
    assert y.social_providers == []


def test_unlink_leaves_password_then_not_linked(db_session, fake_providers):
    fake_providers.add_google("gtok", user_id="g1", email="a@example.com")
    org = identity.signup(db_session, "a@example.com", "pw1")
    provider_links.link_provider(db_session, org.id, "google", "gtok")
    assert provider_links.auth_methods(org) == ["email", "google"]

    org = provider_links.unlink_provider(db_session, org.id, "google")
    assert provider_links.auth_methods(org) == ["email"]

    with pytest.raises(NotLinked):
        provider_links.unlink_provider(db_session, org.id, "google")
    with pytest.raises(NotLinked):
        provider_links.unlink_provider(db_session, org.id, "github")


def test_link_same_provider_twice_is_already_linked(db_session, fake_providers):
    fake_providers.add_google("gtok1", user_id="g1", email="a@example.com")
    fake_providers.add_google("gtok2", user_id="g2", email="a@example.com")
    org = identity.signup(db_session, "a@example.com", "pw1")
    provider_links.link_provider(db_session, org.id, "google", "gtok1")

    with pytest.raises(AlreadyLinked):
        provider_links.link_provider(db_session, org.id, "google", "gtok1")
    with pytest.raises(AlreadyLinked):
        provider_links.link_provider(db_session, org.id, "google", "gtok2")


def test_link_does_not_require_matching_email(db_session, fake_providers):
    fake_providers.add_github("htok", github_id=9, email="someone-else@example.com")
    org = identity.signup(db_session, "a@example.com", "pw1")

    provider_links.link_provider(db_session, org.id, "github", "htok")

    assert org.email == "a@example.com"
    assert org.has_provider("github")


def test_link_with_invalid_token_changes_nothing(db_session, fake_providers):
    org = identity.signup(db_session, "a@example.com", "pw1")
    with pytest.raises(InvalidToken):
        provider_links.link_provider(db_session, org.id, "google", "bad")
    assert org.social_providers == []


def test_unknown_organizer_is_not_found(db_session, fake_providers):
    fake_providers.add_google("gtok", user_id="g1", email="a@example.com")
    with pytest.raises(NotFound):
        provider_links.link_provider(db_session, "missing", "google", "gtok")
    with pytest.raises(NotFound):
        provider_links.unlink_provider(db_session, "missing", "google")
    with pytest.raises(NotFound):
        provider_links.get_full_profile(db_session, "missing")


@pytest.mark.parametrize("order", list(itertools.permutations(["google", "github"])))
def test_unlinking_never_leaves_zero_methods(db_session, order):
    org = identity.resolve_social_identity(db_session, ProviderIdentity("google", "g1", "s@example.com"))
    identity.resolve_social_identity(db_session, ProviderIdentity("github", "h1", "s@example.com"))
    assert org.auth_method_count == 2

    first, second = order
    provider_links.unlink_provider(db_session, org.id, first)
    with pytest.raises(LastMethodRemaining):
        provider_links.unlink_provider(db_session, org.id, second)
    assert org.auth_method_count == 1


def test_full_profile_lists_methods_and_links(db_session):
    org = identity.signup(db_session, "a@example.com", "pw1")
    identity.resolve_social_identity(db_session, ProviderIdentity("github", "h1", "a@example.com"))

    profile = provider_links.get_full_profile(db_session, org.id)

    assert profile["id"] == org.id
    assert profile["email"] == "a@example.com"
    assert profile["auth_methods"] == ["email", "github"]
    assert profile["social_providers"] == [{"provider": "github", "provider_id": "h1"}]
    assert "password_hash" not in profile


def test_concurrent_link_loses_with_provider_taken(db_session, fake_providers, monkeypatch):
    fake_providers.add_github("htok", github_id=1, email="x@example.com")
    x = identity.signup(db_session, "x@example.com", "pw1")
    y = identity.signup(db_session, "y@example.com", "pw2")
    provider_links.link_provider(db_session, x.id, "github", "htok")

    # Y's ownership check runs before X's link is visible.
    monkeypatch.setattr(CredentialStore, "find_by_provider_identity", lambda self, provider, provider_id: None)

    with pytest.raises(ProviderTaken):
        provider_links.link_provider(db_session, y.id, "github", "htok")

    db_session.refresh(y)
    assert y.social_providers == []
    assert [p.provider_id for p in x.social_providers] == ["1"]
