import json
import logging
import sys

import httpx

from shared.config import settings

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def post_events(client: httpx.Client, events) -> int:
    """POST each event to /api/events and return how many were saved."""
    saved = 0
    for event in events:
        try:
            response = client.post("/api/events", json=event)
        except httpx.HTTPError as e:
            logger.error(f"Request failed: {e}")
            continue

        if response.status_code == 201:
            saved += 1
        else:
            logger.warning(f"Event rejected ({response.status_code}): {response.text}")
    return saved


def main(json_path: str, base_url: str) -> None:
    with open(json_path, encoding="utf-8") as fh:
        events = json.load(fh)

    with httpx.Client(base_url=base_url, timeout=10.0) as client:
        saved = post_events(client, events)

    logger.info(f"Saved {saved}/{len(events)} events")


if __name__ == "__main__":
    url = sys.argv[2] if len(sys.argv) > 2 else f"http://localhost:{settings.PORT}"
    main(sys.argv[1], url)
