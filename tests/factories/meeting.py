"""Factory for generating fake meeting payloads for testing."""

from typing import Any, Dict

from faker import Faker

fake = Faker()


def create_fake_meeting(**overrides) -> Dict[str, Any]:
    """A meeting as serialized by the backend (camelCase, numeric id)."""
    meeting = {
        "id": fake.random_int(min=1, max=100000),
        "title": fake.sentence(nb_words=4),
        "status": "COMPLETED",
        "date": fake.date_time_this_year().isoformat(),
        "summary": fake.paragraph(),
        "actionCount": fake.random_int(min=0, max=10),
        "duration": float(fake.random_int(min=60, max=7200)),
        "userId": fake.random_int(min=1, max=1000),
    }
    meeting.update(overrides)
    return meeting


def create_fake_audio(size: int = 2048) -> bytes:
    return fake.binary(length=size)
