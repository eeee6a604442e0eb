"""
Render the Piano collection request for a collected event.

    piano-connector page event.json --settings piano.yaml
    piano-connector track event.json --site-id 123 --collection-domain xyz.pa-cd.com

Prints the request (method, url, headers, body) as JSON. Nothing is sent.
"""
import argparse
import json
import logging
import sys

from pydantic import ValidationError

from piano_connector.config import PianoSettings, load_settings
from piano_connector.connector import PianoConnector
from piano_connector.errors import PianoError
from piano_connector.models import Event
from piano_connector.payload import COLLECTION_DOMAIN_SETTING, SITE_ID_SETTING

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="piano-connector", description=__doc__.strip().splitlines()[0])
    parser.add_argument("operation", choices=["page", "track", "user"])
    parser.add_argument("event", type=str, help="Path to the event JSON file ('-' for stdin)")
    parser.add_argument("--settings", type=str, help="Path to a YAML file of destination settings")
    parser.add_argument("--site-id", type=str, help="Overrides piano_site_id")
    parser.add_argument("--collection-domain", type=str, help="Overrides piano_collection_domain")
    parser.add_argument("--disable-user-events", action="store_true", help="Reject user events")
    parser.add_argument("--log-level", type=str, default="WARNING")
    return parser


def run(args: argparse.Namespace) -> int:
    if args.event == "-":
        raw_event = sys.stdin.read()
    else:
        with open(args.event, "r", encoding="utf-8") as f:
            raw_event = f.read()

    try:
        event = Event.model_validate_json(raw_event)
    except ValidationError as e:
        print(f"error: invalid event: {e}", file=sys.stderr)
        return 1

    settings = load_settings(args.settings) if args.settings else {}
    if args.site_id:
        settings[SITE_ID_SETTING] = args.site_id
    if args.collection_domain:
        settings[COLLECTION_DOMAIN_SETTING] = args.collection_domain

    policy = PianoSettings.from_env()
    if args.disable_user_events:
        policy.user_events_enabled = False

    handler = getattr(PianoConnector(policy), args.operation)
    try:
        request = handler(event, settings)
    except PianoError as e:
        logger.info(f"[Piano CLI] {args.operation} event {event.uuid} rejected: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(request.model_dump_json(indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
