"""
Piano Analytics connector entry points.

    page(event, settings)  page view    -> "page.display"
    track(event, settings) custom event -> the event's own name
    user(event, settings)  identity     -> "identify"

Each returns an EdgeeRequest ready to be sent to the collection domain, or
raises a PianoError describing why the event cannot be mapped.
"""

import json
import logging

from piano_connector.config import PianoSettings
from piano_connector.errors import (
    DataVariantMismatch,
    RequiredFieldMissing,
    UnsupportedOperation,
)
from piano_connector.models import EdgeeRequest, Event, PageData, TrackData, UserData
from piano_connector.payload import PianoEvent, PianoPayload, Settings

logger = logging.getLogger(__name__)

PAGE_EVENT_NAME = "page.display"
USER_EVENT_NAME = "identify"
DEFAULT_HAS_ACCESS = "anon"


class PianoConnector:
    def __init__(self, settings: PianoSettings | None = None):
        self._settings = settings or PianoSettings()

    def page(self, event: Event, settings: Settings) -> EdgeeRequest:
        match event.data:
            case PageData():
                return self._page(event, event.data, settings)
            case _:
                raise DataVariantMismatch("Missing page data")

    def track(self, event: Event, settings: Settings) -> EdgeeRequest:
        match event.data:
            case TrackData(name=""):
                raise RequiredFieldMissing("Missing event name")
            case TrackData():
                return self._track(event, event.data, settings)
            case _:
                raise DataVariantMismatch("Missing track data")

    def user(self, event: Event, settings: Settings) -> EdgeeRequest:
        if not self._settings.user_events_enabled:
            raise UnsupportedOperation("User event not mapped to Piano Analytics")

        match event.data:
            case UserData(user_id="", anonymous_id=""):
                raise RequiredFieldMissing("Missing user id or anonymous id")
            case UserData():
                return self._user(event, event.data, settings)
            case _:
                raise DataVariantMismatch("Missing user data")

    def _page(self, event: Event, data: PageData, settings: Settings) -> EdgeeRequest:
        payload = PianoPayload.from_settings(event, settings)
        piano_event = PianoEvent.from_event(PAGE_EVENT_NAME, event)
        fields = piano_event.data

        fields.pageview_id = event.uuid
        if data.name:
            fields.page_name = data.name
        if data.title:
            fields.content_title = data.title
            fields.page_title_html = data.title
            fields.page = data.title
        fields.content_keywords = list(data.keywords)
        fields.event_url_full = data.url
        if data.referrer:
            fields.previous_url = data.referrer

        fields.has_access = DEFAULT_HAS_ACCESS
        for key, value in data.properties:
            if key == "has_access":
                fields.has_access = value
        fields.add_properties(data.properties, skip=("has_access",))

        payload.events.append(piano_event)
        return build_edgee_request(payload)

    def _track(self, event: Event, data: TrackData, settings: Settings) -> EdgeeRequest:
        payload = PianoPayload.from_settings(event, settings)
        piano_event = PianoEvent.from_event(data.name, event)
        piano_event.data.add_properties(data.properties)

        payload.events.append(piano_event)
        return build_edgee_request(payload)

    def _user(self, event: Event, data: UserData, settings: Settings) -> EdgeeRequest:
        payload = PianoPayload.from_settings(event, settings)
        piano_event = PianoEvent.from_event(USER_EVENT_NAME, event)
        fields = piano_event.data

        if data.anonymous_id:
            fields.user_id = data.anonymous_id
        if data.user_id:
            fields.user_id = data.user_id
        for key, value in data.properties:
            if key == "user_category":
                fields.user_category = value
        fields.add_properties(data.properties, skip=("user_category",))

        payload.events.append(piano_event)
        return build_edgee_request(payload)


def build_edgee_request(payload: PianoPayload) -> EdgeeRequest:
    url = (
        f"https://{payload.collection_domain}/event"
        f"?s={payload.site_id}&idclient={payload.id_client}"
    )
    logger.debug(f"[Piano] Built request for {len(payload.events)} event(s) to {url}")
    return EdgeeRequest(
        method="POST",
        url=url,
        # The collection API takes a JSON body sent as text/plain.
        headers=[("content-type", "text/plain")],
        body=json.dumps(payload.to_wire(), separators=(",", ":"), ensure_ascii=False),
        forward_client_headers=True,
    )


# --- Module-level entry points (policy read from the environment) ---

def page(event: Event, settings: Settings) -> EdgeeRequest:
    return PianoConnector(PianoSettings.from_env()).page(event, settings)


def track(event: Event, settings: Settings) -> EdgeeRequest:
    return PianoConnector(PianoSettings.from_env()).track(event, settings)


def user(event: Event, settings: Settings) -> EdgeeRequest:
    return PianoConnector(PianoSettings.from_env()).user(event, settings)
