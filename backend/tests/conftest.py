"""Shared pytest fixtures: a gateway context wired to in-memory fakes."""

import pytest
from fastapi.testclient import TestClient

from fakes import FakeClock, FakeImageModel, FakeRecognizer, FakeSynthesizer, FakeTextModel, make_settings
from lesson_gateway.context import build_context
from lesson_gateway.main import create_app


@pytest.fixture
def clock():
	return FakeClock()


@pytest.fixture
def cfg():
	return make_settings()


@pytest.fixture
def text_model():
	return FakeTextModel()


@pytest.fixture
def image_model():
	return FakeImageModel()


@pytest.fixture
def synthesizer():
	return FakeSynthesizer()


@pytest.fixture
def recognizer():
	return FakeRecognizer()


@pytest.fixture
def ctx(cfg, text_model, image_model, synthesizer, recognizer, clock):
	"""Fresh gateway context per test; no state leaks between tests."""
	return build_context(
		cfg,
		text_model=text_model,
		image_model=image_model,
		synthesizer=synthesizer,
		recognizer=recognizer,
		clock=clock,
	)


@pytest.fixture
def client(ctx):
	app = create_app(ctx)
	# Unhandled errors must come back as 500 responses, not be re-raised into the test
	return TestClient(app, raise_server_exceptions=False)
