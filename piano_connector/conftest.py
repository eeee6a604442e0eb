import pytest

from piano_connector.models import (
    Campaign,
    Client,
    Context,
    Event,
    PageData,
    Session,
    TrackData,
    UserData,
)

COLLECTION_DOMAIN = "ABCDEFG.pa-cd.com"


def sample_user_data(edgee_id: str = "abc") -> UserData:
    return UserData(
        user_id="123",
        anonymous_id="456",
        edgee_id=edgee_id,
        properties=[
            ("prop1", "value1"),
            ("prop2", "10"),
            ("user_category", "whatever"),
        ],
    )


def sample_page_data() -> PageData:
    return PageData(
        name="page name",
        category="category",
        keywords=["value1", "value2"],
        title="page title",
        url="https://example.com/full-url?test=1",
        path="/full-path",
        search="?at_medium=abc&at_campaign=&at_something=true&at_something_else=false",
        referrer="https://example.com/another-page",
        properties=[
            ("prop1", "value1"),
            ("prop2", "10"),
            ("has_access", "true"),
        ],
    )


def sample_track_data(name: str = "event-name") -> TrackData:
    return TrackData(
        name=name,
        properties=[
            ("prop1", "value1"),
            ("prop2", "10"),
        ],
    )


def sample_context(edgee_id: str = "abc", locale: str = "fr", timezone: str = "CET") -> Context:
    return Context(
        page=sample_page_data(),
        user=sample_user_data(edgee_id),
        client=Client(
            city="Paris",
            ip="192.168.0.1",
            locale=locale,
            timezone=timezone,
            user_agent="Chrome",
            user_agent_architecture="arm",
            user_agent_bitness="64",
            user_agent_full_version_list="Brand1;1.0.0|Brand2;2.0.0",
            user_agent_version_list="abc",
            user_agent_mobile="1",
            user_agent_model="don't know",
            os_name="MacOS",
            os_version="latest",
            screen_width=1024,
            screen_height=768,
            screen_density=2.0,
            continent="Europe",
            country_code="FR",
            country_name="France",
            region="West Europe",
        ),
        campaign=Campaign(
            name="random",
            source="random",
            medium="random",
            term="random",
            content="random",
            creative_format="random",
            marketing_tactic="random",
        ),
        session=Session(
            session_id="random",
            previous_session_id="random",
            session_count=2,
            session_start=True,
            first_seen=123,
            last_seen=123,
        ),
    )


def sample_event(data, context: Context | None = None, uuid: str = "e3b0c442-98fc-1c14") -> Event:
    return Event(
        uuid=uuid,
        timestamp=123,
        timestamp_millis=123000,
        timestamp_micros=123000000,
        data=data,
        context=context or sample_context(),
        consent="granted",
    )


@pytest.fixture
def settings():
    return [
        ("piano_site_id", "abc"),
        ("piano_collection_domain", COLLECTION_DOMAIN),
    ]


@pytest.fixture
def page_event():
    return sample_event(sample_page_data())


@pytest.fixture
def track_event():
    return sample_event(sample_track_data())


@pytest.fixture
def user_event():
    return sample_event(sample_user_data())
