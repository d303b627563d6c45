from datetime import date

import pytest

from bloomcare.models.health import BloodPressure, HealthSnapshot, PatientProfile
from bloomcare.services.ai_service import AIService
from bloomcare.services.care_service import PregnancyCareService
from bloomcare.services.chat_responder import ChatResponder
from bloomcare.services.report_generator import ReportGenerator
from bloomcare.services.storage_service import StorageService


class FakeLLM:
    """Records prompts and returns a canned completion."""

    def __init__(self, response):
        self.response = response
        self.prompts = []

    def call(self, prompt):
        self.prompts.append(prompt)
        return self.response


class FailingLLM:
    def __init__(self):
        self.calls = 0

    def call(self, prompt):
        self.calls += 1
        raise RuntimeError("backend unreachable")


def make_snapshot(
    systolic=120,
    diastolic=80,
    blood_sugar=100,
    weight=140,
    mood="Happy",
    week=20,
    notes=None,
):
    return HealthSnapshot(
        blood_pressure=BloodPressure(systolic=systolic, diastolic=diastolic),
        blood_sugar=blood_sugar,
        weight=weight,
        mood=mood,
        gestational_week=week,
        notes=notes,
    )


@pytest.fixture
def patient():
    return PatientProfile(user_id="maria@example.com", name="Maria", current_week=20)


@pytest.fixture
def storage(tmp_path):
    return StorageService(str(tmp_path / "bloomcare-test.db"))


@pytest.fixture
def failing_ai():
    return AIService(FailingLLM())


@pytest.fixture
def care_service(storage):
    return PregnancyCareService(
        storage=storage,
        report_generator=ReportGenerator(),
        chat_responder=ChatResponder(),
    )


@pytest.fixture
def registered_patient(care_service):
    return care_service.register_patient(
        "maria@example.com",
        "Maria",
        pregnancy_start_date=date(2024, 1, 1),
    )
