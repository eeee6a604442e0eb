from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Annotated, Literal, Union


Properties = list[tuple[str, str]]


# --- Normalized Event Models ---

class PageData(BaseModel):
    kind: Literal["page"] = "page"
    name: str = ""
    category: str = ""
    keywords: list[str] = []
    title: str = ""
    url: str = ""
    path: str = ""
    search: str = ""
    referrer: str = ""
    properties: Properties = []


class TrackData(BaseModel):
    kind: Literal["track"] = "track"
    name: str = ""
    products: list[dict] = []
    properties: Properties = []


class UserData(BaseModel):
    kind: Literal["user"] = "user"
    user_id: str = ""
    anonymous_id: str = ""
    edgee_id: str = ""
    properties: Properties = []


class Client(BaseModel):
    ip: str = ""
    locale: str = ""
    timezone: str = ""
    user_agent: str = ""
    user_agent_architecture: str = ""
    user_agent_bitness: str = ""
    user_agent_full_version_list: str = ""
    user_agent_version_list: str = ""
    user_agent_mobile: str = ""
    user_agent_model: str = ""
    os_name: str = ""
    os_version: str = ""
    screen_width: int = 0
    screen_height: int = 0
    screen_density: float = 0.0
    continent: str = ""
    country_code: str = ""
    country_name: str = ""
    region: str = ""
    city: str = ""


class Campaign(BaseModel):
    name: str = ""
    source: str = ""
    medium: str = ""
    term: str = ""
    content: str = ""
    creative_format: str = ""
    marketing_tactic: str = ""


class Session(BaseModel):
    session_id: str = ""
    previous_session_id: str = ""
    session_count: int = 0
    session_start: bool = False
    first_seen: int = 0
    last_seen: int = 0


class Context(BaseModel):
    page: PageData = Field(default_factory=PageData)
    user: UserData = Field(default_factory=UserData)
    client: Client = Field(default_factory=Client)
    campaign: Campaign = Field(default_factory=Campaign)
    session: Session = Field(default_factory=Session)


EventData = Annotated[Union[PageData, TrackData, UserData], Field(discriminator="kind")]


class Event(BaseModel):
    """A vendor-neutral collected event with its context."""
    model_config = ConfigDict(frozen=True)

    uuid: str = ""
    timestamp: int = 0
    timestamp_millis: int = 0
    timestamp_micros: int = 0
    event_type: Literal["page", "track", "user"]
    data: EventData
    context: Context = Field(default_factory=Context)
    consent: Literal["pending", "granted", "denied"] | None = None

    @model_validator(mode="before")
    @classmethod
    def tag_data_from_event_type(cls, values):
        # Raw collector JSON carries the variant on the event, not on the data.
        if isinstance(values, dict):
            data = values.get("data")
            event_type = values.get("event_type")
            if isinstance(data, dict):
                if "kind" not in data and event_type:
                    values = {**values, "data": {**data, "kind": event_type}}
            elif isinstance(data, (PageData, TrackData, UserData)) and not event_type:
                values = {**values, "event_type": data.kind}
        return values


# --- Request Descriptor ---

class EdgeeRequest(BaseModel):
    """The HTTP request the host sends on the connector's behalf."""
    method: Literal["POST"] = "POST"
    url: str
    headers: list[tuple[str, str]] = []
    body: str
    forward_client_headers: bool = True


# --- Piano Payload Models ---

class ChUa(BaseModel):
    """One brand/version pair of a client-hints list."""
    brand: str
    version: str


# --- Preview API Models ---

class RenderRequest(BaseModel):
    """A collected event plus the destination settings to map it with."""
    event: Event
    settings: dict[str, str] = {}
