import pytest

from lesson_gateway.errors import ThrottlingError, ValidationError
from lesson_gateway.services.diagram import DiagramService


@pytest.fixture
def service(ctx):
	return DiagramService(ctx)


@pytest.mark.unit
class TestDiagramService:
	@pytest.mark.asyncio
	async def test_non_visual_topic_skips_generation(self, service, image_model, ctx):
		result = await service.get_diagram("Classroom Etiquette", 5, "English")

		assert result["needsDiagram"] is False
		assert result["reason"]
		assert image_model.calls == []
		assert ctx.diagrams.counters.total_requests == 0

	@pytest.mark.asyncio
	async def test_generates_then_serves_from_cache(self, service, image_model):
		first = await service.get_diagram("Water cycle", 5, "English")
		second = await service.get_diagram("water cycle", 5, "English")

		assert first["needsDiagram"] is True
		assert first["style"] == "flowchart"
		assert first["imageBase64"] == image_model.image_base64
		assert first["cached"] is False
		assert second["cached"] is True
		assert len(image_model.calls) == 1

	@pytest.mark.asyncio
	async def test_explicit_style_is_used_and_keyed(self, service, image_model):
		await service.get_diagram("Water cycle", 5, "English", "illustration")
		result = await service.get_diagram("Water cycle", 5, "English", "flowchart")

		assert result["cached"] is False
		assert len(image_model.calls) == 2
		assert image_model.calls[0][0].startswith("Educational illustration of Water cycle")

	@pytest.mark.asyncio
	async def test_invalid_style_rejected(self, service, image_model):
		with pytest.raises(ValidationError):
			await service.get_diagram("Water cycle", 5, "English", "oil painting")
		assert image_model.calls == []

	@pytest.mark.asyncio
	async def test_throttling_propagates(self, service, image_model):
		image_model.error = ThrottlingError()

		with pytest.raises(ThrottlingError):
			await service.get_diagram("Water cycle", 5, "English")

	@pytest.mark.asyncio
	async def test_clear_single_key(self, service, ctx):
		result = await service.get_diagram("Water cycle", 5, "English")
		await service.get_diagram("Photosynthesis", 5, "English")

		cleared = service.clear_cache(result["key"])

		assert cleared["cleared"] == {"diagrams": 1}
		assert ctx.diagrams.store.keys() == 1
		assert service.clear_cache("missing")["cleared"] == {"diagrams": 0}
		assert service.clear_cache()["cleared"] == {"diagrams": 1}

	def test_styles(self, service):
		assert len(service.styles()["styles"]) == 5
