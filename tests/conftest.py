from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from ecoswap.app.api.deps import get_analyzer, get_extractor, get_governor
from ecoswap.app.main import create_app
from ecoswap.app.services.substitution.ingredient_analyzer import IngredientAnalyzer
from ecoswap.app.services.url_parsing.models import RawExtractionResult
from ecoswap.app.services.url_parsing.usage_governor import UsageGovernor


class StubExtractor:
    def __init__(self):
        self.result: Optional[RawExtractionResult] = None
        self.exc: Optional[Exception] = None
        self.calls: List[str] = []

    async def extract(self, url: str) -> RawExtractionResult:
        self.calls.append(url)
        if self.exc is not None:
            raise self.exc
        return self.result


@pytest.fixture
def stub_extractor():
    return StubExtractor()


@pytest.fixture
def governor():
    return UsageGovernor(max_requests=5, max_daily_cost=2.0, has_credential=False)


@pytest.fixture
def app(stub_extractor, governor):
    app = create_app()
    analyzer = IngredientAnalyzer()

    app.dependency_overrides[get_extractor] = lambda: stub_extractor
    app.dependency_overrides[get_analyzer] = lambda: analyzer
    app.dependency_overrides[get_governor] = lambda: governor
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
