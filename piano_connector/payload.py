"""
Piano Analytics payload: the envelope, its events and the field mapping
from a collected event onto Piano's standard properties.

Standard properties:
https://developers.atinternet-solutions.com/piano-analytics/data-collection/how-to-send-events/collection-api#standard-properties
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field

from piano_connector.errors import MissingConfiguration
from piano_connector.models import ChUa, Event, Properties
from piano_connector.parsers import (
    extract_campaign_parameters,
    parse_value,
    split_locale,
    string_to_ch_ua,
)

logger = logging.getLogger(__name__)

COLLECTION_PLATFORM = "edgee"
COLLECTION_VERSION = "1.0.0"

SITE_ID_SETTING = "piano_site_id"
COLLECTION_DOMAIN_SETTING = "piano_collection_domain"

Settings = Mapping[str, str] | Iterable[tuple[str, str]]


class PianoData(BaseModel):
    """Piano event properties, in wire order.

    ``None`` means unset and is left out of the request body. Custom
    properties go to ``additional_fields`` and are written next to the fixed
    properties at serialization time.
    """
    browser_language: str = ""
    browser_language_local: str = ""

    ch_ua: list[ChUa] | None = None
    ch_ua_arch: str | None = None
    ch_ua_bitness: str | None = None
    ch_ua_full_version: str | None = None
    ch_ua_full_version_list: list[ChUa] | None = None
    ch_ua_mobile: bool = False
    ch_ua_model: str | None = None
    ch_ua_platform: str | None = None
    ch_ua_platform_version: str | None = None

    content_keywords: list[str] | None = None
    content_title: str | None = None
    cookie_creation_date: str | None = None

    device_display_width: int | None = None
    device_display_height: int | None = None
    device_hour: int | None = None
    device_local_hour: int = 0
    device_screen_width: int | None = None
    device_screen_height: int | None = None
    device_timestamp_utc: int = 0

    event_collection_platform: str = COLLECTION_PLATFORM
    event_collection_version: str = COLLECTION_VERSION

    event_url_full: str | None = None
    has_access: str | None = None
    page: str | None = None
    page_title_html: str | None = None
    page_name: str | None = None

    pageview_id: str | None = None
    previous_url: str | None = None

    visitor_privacy_consent: bool = True
    visitor_privacy_mode: str = "optin"

    src_campaign: str | None = None
    src_content: str | None = None
    src_medium: str | None = None
    src_source: str | None = None
    src_term: str | None = None

    user_id: str | None = None
    user_category: str | None = None

    additional_fields: dict[str, Any] = Field(default_factory=dict, exclude=True)

    def add_properties(self, properties: Properties, skip: tuple[str, ...] = ()) -> None:
        """Coerce custom properties into ``additional_fields``, except ``skip`` keys."""
        for key, value in properties:
            if key in skip:
                continue
            self.additional_fields[key] = parse_value(value)

    def to_wire(self) -> dict:
        wire = self.model_dump(exclude_none=True)
        for key, value in self.additional_fields.items():
            if key in wire:
                logger.warning(f"[Piano] Dropping custom property '{key}': it collides with a standard property")
                continue
            wire[key] = value
        return wire


class PianoEvent(BaseModel):
    name: str
    data: PianoData

    @classmethod
    def from_event(cls, name: str, event: Event) -> "PianoEvent":
        """Map the properties every Piano event shares from a collected event."""
        context = event.context
        client = context.client
        data = PianoData()

        if context.page.referrer:
            data.previous_url = context.page.referrer

        data.browser_language, data.browser_language_local = split_locale(client.locale)

        data.device_hour = _device_hour(event.timestamp, client.timezone)
        data.device_timestamp_utc = event.timestamp
        # Kept as the raw timestamp for compatibility with existing reports.
        data.device_local_hour = event.timestamp

        # User agent client hints
        if client.user_agent_version_list:
            data.ch_ua = string_to_ch_ua(client.user_agent_version_list, full=False) or None
        if client.user_agent_full_version_list:
            full_version_list = string_to_ch_ua(client.user_agent_full_version_list, full=True)
            if full_version_list:
                data.ch_ua_full_version_list = full_version_list
                data.ch_ua_full_version = full_version_list[0].version
        data.ch_ua_arch = client.user_agent_architecture or None
        data.ch_ua_bitness = client.user_agent_bitness or None
        data.ch_ua_mobile = client.user_agent_mobile == "1"
        data.ch_ua_model = client.user_agent_model or None
        data.ch_ua_platform = client.os_name or None
        data.ch_ua_platform_version = client.os_version or None

        if client.screen_width > 0:
            data.device_display_width = client.screen_width
            data.device_screen_width = client.screen_width
        if client.screen_height > 0:
            data.device_display_height = client.screen_height
            data.device_screen_height = client.screen_height

        data.cookie_creation_date = _rfc3339(context.session.first_seen)

        # Privacy gating already happened upstream.
        data.visitor_privacy_consent = True
        data.visitor_privacy_mode = "optin"

        # Campaign: structured (UTM) values first, then at_* query parameters.
        # https://developers.atinternet-solutions.com/piano-analytics/data-collection/how-to-send-events/marketing-campaigns
        campaign = context.campaign
        data.src_medium = campaign.medium or None
        data.src_campaign = campaign.name or None
        data.src_source = campaign.source or None
        data.src_content = campaign.content or None
        data.src_term = campaign.term or None
        if context.page.search:
            params = extract_campaign_parameters(context.page.search)
            if params.medium is not None:
                data.src_medium = params.medium
            if params.campaign is not None:
                data.src_campaign = params.campaign
            data.additional_fields.update(params.extra_fields)

        # User
        # https://developers.atinternet-solutions.com/piano-analytics/data-collection/how-to-send-events/users
        user = context.user
        if user.anonymous_id:
            data.user_id = user.anonymous_id
        if user.user_id:
            data.user_id = user.user_id
        for key, value in user.properties:
            if key == "user_category":
                data.user_category = value

        return cls(name=name, data=data)


class PianoPayload(BaseModel):
    """Request envelope. Only ``events`` goes into the body; the rest builds the URL."""
    site_id: str = Field(exclude=True)
    collection_domain: str = Field(exclude=True)
    id_client: str = Field(exclude=True)
    events: list[PianoEvent] = []

    @classmethod
    def from_settings(cls, event: Event, settings: Settings) -> "PianoPayload":
        cred = {str(key): str(value) for key, value in dict(settings).items()}

        site_id = cred.get(SITE_ID_SETTING)
        if not site_id:
            raise MissingConfiguration("Missing piano site id")

        collection_domain = cred.get(COLLECTION_DOMAIN_SETTING)
        if not collection_domain:
            raise MissingConfiguration("Missing piano collection domain")

        # TODO: keep the client id stable across edgee id rotations.
        return cls(
            site_id=site_id,
            collection_domain=collection_domain,
            id_client=event.context.user.edgee_id,
        )

    def to_wire(self) -> dict:
        return {"events": [{"name": e.name, "data": e.data.to_wire()} for e in self.events]}


def _device_hour(timestamp: int, timezone_name: str) -> int | None:
    """Hour of ``timestamp`` in the client's timezone, UTC when none is given."""
    try:
        moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
        if not timezone_name:
            return moment.hour
        return moment.astimezone(ZoneInfo(timezone_name)).hour
    except (ZoneInfoNotFoundError, ValueError, OverflowError, OSError) as e:
        logger.debug(f"[Piano] No device hour for timestamp {timestamp} in '{timezone_name}': {e}")
        return None


def _rfc3339(epoch_seconds: int) -> str | None:
    try:
        return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).isoformat()
    except (ValueError, OverflowError, OSError):
        logger.debug(f"[Piano] First seen epoch {epoch_seconds} is out of range")
        return None
