from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Document(BaseModel):
    # unknown keys ride along so a replace never drops client data
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class PastEvent(_Document):
    title: str
    description: str | None = None


class PastEventCategory(_Document):
    events: list[PastEvent] | None = None
    coming_soon: bool | None = None


class Countdown(_Document):
    days: int = 0
    hours: int = 0
    minutes: int = 0


class UpcomingEvent(_Document):
    id: str
    title: str
    date: str
    time: str
    location: str
    description: str
    registration_link: str
    countdown: Countdown = Field(default_factory=Countdown)


class EventsDocument(_Document):
    past_events: dict[str, PastEventCategory]
    upcoming_events: list[UpcomingEvent]
    last_modified: int = 0


class Sponsor(_Document):
    id: str
    name: str
    logo: str
    industry: str
    description: str
    website: str | None = None
    is_active: bool


class SponsorsDocument(_Document):
    sponsors: list[Sponsor]
    last_modified: int = 0


class TeamMember(_Document):
    id: str
    name: str
    title: str
    bio: str
    image: str
    email: str
    linkedin: str | None = None
    achievements: list[str] = Field(default_factory=list)
    expertise: list[str] = Field(default_factory=list)
    quote: str
    is_leadership: bool | None = None


class LuminariesDocument(_Document):
    faculty: list[TeamMember]
    leadership: list[TeamMember]
    last_modified: int = 0


class DocumentUpdateRequest(BaseModel):
    data: dict[str, Any]


class SyncStatus(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    needs_update: bool
    server_last_modified: int
    client_last_modified: int
