import json
import random
from datetime import datetime, timedelta, timezone

SOURCES = ["web", "ios", "android", "backend", "cron"]
EVENT_TYPES = [
    "page_view", "click", "signup", "login", "logout", "purchase", "error"
]


def generate_events(num_events: int, days: int = 7):
    base_time = datetime.now(timezone.utc)

    events = []
    for _ in range(num_events):
        event = {
            "source": random.choice(SOURCES),
            "event_type": random.choice(EVENT_TYPES),
            "occurred_at": (base_time - timedelta(seconds=random.randint(0, 3600 * 24 * days))).isoformat(),
            "metadata": {"session": random.randint(1, 500)},
        }
        events.append(event)
    return events


def main():
    data = generate_events(200)
    with open("events.json", "w") as f:
        json.dump(data, f, indent=2)


if __name__ == "__main__":
    main()
