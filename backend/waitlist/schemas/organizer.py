from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class OrganizerOut(BaseModel):
    id: str
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SocialProviderOut(BaseModel):
    provider: str
    provider_id: str

    model_config = ConfigDict(from_attributes=True)


class OrganizerProfileOut(BaseModel):
    id: str
    email: str
    created_at: datetime
    auth_methods: list[str]
    social_providers: list[SocialProviderOut]
