"""Shared pytest fixtures for the Tatar Tutor test suite."""

import random

import pytest

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from exercises import ModePolicy, RevertScheduler
from models import (
    FillBlankPayload,
    ImageChoiceGroupPayload,
    ImageChoicePayload,
    MatchingPair,
    MatchTermsPayload,
    Task,
    TaskType,
)
from storage import ContentBundle, init_schema, seed_content
from storage.seed import FillBlankRecord, ImageRecord
from fakes import FakeClock, InMemoryContentSource

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()

@pytest.fixture
def scheduler(clock) -> RevertScheduler:
    return RevertScheduler(clock=clock)

@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)

@pytest.fixture
def practice() -> ModePolicy:
    return ModePolicy.practice()

@pytest.fixture
def test_mode() -> ModePolicy:
    return ModePolicy.test()

@pytest.fixture
def family_pairs() -> list[MatchingPair]:
    return [
        MatchingPair(source="әни", target="mother"),
        MatchingPair(source="әти", target="father"),
        MatchingPair(source="апа", target="older sister"),
        MatchingPair(source="абый", target="older brother"),
    ]

@pytest.fixture
def match_payload(family_pairs) -> MatchTermsPayload:
    return MatchTermsPayload(pairs=family_pairs)

@pytest.fixture
def fill_payload() -> FillBlankPayload:
    return FillBlankPayload(
        template="Мин иртән ___ эчәм.",
        correct_answer="чәй",
        distractors=("икмәк", "бал", "алма"),
    )

@pytest.fixture
def image_payload() -> ImageChoiceGroupPayload:
    return ImageChoiceGroupPayload(
        items=(
            ImageChoicePayload(image_ref="ImageChoiceFood/bread.png", correct_answer="икмәк"),
            ImageChoicePayload(image_ref="ImageChoiceFood/milk.png", correct_answer="сөт"),
            ImageChoicePayload(image_ref="ImageChoiceFood/apple.png", correct_answer="алма"),
        )
    )

@pytest.fixture
def sample_tasks(match_payload, fill_payload, image_payload) -> list[Task]:
    """One task of each type."""
    return [
        Task(id="t-match", topic="FamilyMatch", type=TaskType.MATCH_TERMS, payload=match_payload),
        Task(id="t-fill", topic="FoodFillInBlank", type=TaskType.FILL_IN_BLANK, payload=fill_payload),
        Task(id="t-image", topic="ImageChoiceFood", type=TaskType.IMAGE_CHOICE, payload=image_payload),
    ]

@pytest.fixture
def memory_source(family_pairs, fill_payload, image_payload) -> InMemoryContentSource:
    return InMemoryContentSource(
        pairs={"FamilyMatch": family_pairs, "FoodMatch": family_pairs[:2]},
        sentences={"FoodFillInBlank": [fill_payload]},
        images={"ImageChoiceFood": list(image_payload.items)},
    )

@pytest.fixture
def sample_bundle() -> ContentBundle:
    """Small content bundle covering every content table."""
    return ContentBundle(
        match_pairs={
            "FamilyMatch": [
                MatchingPair(source="әни", target="mother"),
                MatchingPair(source="әти", target="father"),
                MatchingPair(source="әби", target="grandmother"),
            ],
        },
        fill_blank={
            "FoodFillInBlank": [
                FillBlankRecord(template="Мин иртән ___ эчәм.", answer="чәй"),
                FillBlankRecord(template="Сыер ___ бирә.", answer="сөт"),
                FillBlankRecord(template="Кибеттән ___ сатып алдым.", answer="икмәк"),
            ],
        },
        image_choices={
            "ImageChoiceFood": [
                ImageRecord(image="bread", word="икмәк"),
                ImageRecord(image="milk", word="сөт"),
            ],
        },
    )

@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_tutor.db"
    init_schema(db_path)
    return db_path

@pytest.fixture
def populated_test_db(test_db_path, sample_bundle) -> Path:
    """Create a test database seeded with the sample bundle."""
    seed_content(sample_bundle, test_db_path)
    return test_db_path
