"""Pytest configuration for integration tests.

Builds a provider backed by the scriptable fake engine so tests exercise
the full path: create_lmstudio() → model → do_generate/do_stream → act().
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import pytest

from lmstudio_provider import LMStudioChatLanguageModel, create_lmstudio
from tests.utils.fake_engine import MODEL_ID, FakeEngineClient, FakeEngineModel, Step


@dataclass
class ProviderHarness:
    model: LMStudioChatLanguageModel
    engine: FakeEngineModel
    client: FakeEngineClient


@pytest.fixture
def harness() -> Callable[..., ProviderHarness]:
    def build(steps: Sequence[Step], settings: Any = None) -> ProviderHarness:
        engine = FakeEngineModel(steps, identifier=MODEL_ID)
        client = FakeEngineClient(models={MODEL_ID: engine})
        provider = create_lmstudio(settings, client=client)
        return ProviderHarness(model=provider(MODEL_ID), engine=engine, client=client)

    return build
