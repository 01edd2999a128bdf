from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

SLUG_PATTERN = r"^[a-z0-9-]+$"


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    slug: str = Field(min_length=1, max_length=50, pattern=SLUG_PATTERN)
    waitlist_title: Optional[str] = Field(default=None, max_length=100)
    waitlist_description: Optional[str] = Field(default=None, max_length=500)
    waitlist_background: Optional[str] = Field(default=None, max_length=200)
    image: Optional[str] = Field(default=None, max_length=200)
    icon: Optional[str] = Field(default=None, max_length=200)
    category: Optional[str] = Field(default=None, max_length=50)
    tagline: Optional[str] = Field(default=None, max_length=200)
    full_description: Optional[str] = Field(default=None, max_length=5000)
    developer: Optional[str] = Field(default=None, max_length=100)
    language: Optional[str] = Field(default=None, max_length=50)
    platform: Optional[str] = Field(default=None, max_length=100)
    launch_date: Optional[date] = None
    screenshots: List[str] = Field(default_factory=list)
    rating: float = Field(default=0, ge=0, le=5)


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=50, pattern=SLUG_PATTERN)
    waitlist_title: Optional[str] = Field(default=None, max_length=100)
    waitlist_description: Optional[str] = Field(default=None, max_length=500)
    waitlist_background: Optional[str] = Field(default=None, max_length=200)
    image: Optional[str] = Field(default=None, max_length=200)
    icon: Optional[str] = Field(default=None, max_length=200)
    category: Optional[str] = Field(default=None, max_length=50)
    tagline: Optional[str] = Field(default=None, max_length=200)
    full_description: Optional[str] = Field(default=None, max_length=5000)
    developer: Optional[str] = Field(default=None, max_length=100)
    language: Optional[str] = Field(default=None, max_length=50)
    platform: Optional[str] = Field(default=None, max_length=100)
    launch_date: Optional[date] = None
    screenshots: Optional[List[str]] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)


class ServiceOut(BaseModel):
    id: int
    organizer_id: str
    name: str
    description: Optional[str] = None
    slug: str
    waitlist_title: Optional[str] = None
    waitlist_description: Optional[str] = None
    waitlist_background: Optional[str] = None
    image: Optional[str] = None
    icon: Optional[str] = None
    category: Optional[str] = None
    tagline: Optional[str] = None
    full_description: Optional[str] = None
    developer: Optional[str] = None
    language: Optional[str] = None
    platform: Optional[str] = None
    launch_date: Optional[str] = None
    screenshots: List[str] = Field(default_factory=list)
    rating: float = 0
    participant_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicServiceOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    slug: str
    image: Optional[str] = None
    category: Optional[str] = None
    participant_count: int = 0


class WaitlistDetailsOut(BaseModel):
    title: str
    description: str
    background: str
    current_participants: int


class JoinWaitlistIn(BaseModel):
    email: EmailStr


class JoinWaitlistOut(BaseModel):
    message: str
    waitlist_entry_id: int


class ParticipantCountOut(BaseModel):
    current_participants: int


class ParticipantOut(BaseModel):
    id: int
    email: str
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)
