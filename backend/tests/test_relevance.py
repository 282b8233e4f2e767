import pytest

from lesson_gateway.relevance import (
	DIAGRAM_STYLES,
	build_diagram_prompt,
	get_suggested_style,
	list_styles,
	needs_visual_diagram,
)


@pytest.mark.unit
class TestNeedsVisualDiagram:
	@pytest.mark.parametrize("topic", ["Photosynthesis", "The WATER CYCLE", "Parts of a flower", "Cellular respiration", "Plant cells", "Human organs"])
	def test_visual_topics(self, topic):
		assert needs_visual_diagram(topic) is True

	@pytest.mark.parametrize(
		"topic",
		[
			"Classroom Etiquette",
			"",
			"Good manners",
			"General Knowledge",
			"Excellence in Sports",
			"Organization skills",
			"Elementary manners",
			"Theatre and drama",
			"Starting a business",
			"Peer pressure",
			"Managing emotions",
		],
	)
	def test_non_visual_topics(self, topic):
		assert needs_visual_diagram(topic) is False


@pytest.mark.unit
class TestSuggestedStyle:
	@pytest.mark.parametrize(
		"topic,style",
		[
			("Water cycle", "flowchart"),
			("Sorting algorithm", "flowchart"),
			("Desert animals", "illustration"),
			("Plant cells", "illustration"),
			("Structure of an atom", "scientific-diagram"),
			("Concept of fractions", "abstract"),
			("Photosynthesis", "iconic"),
		],
	)
	def test_first_matching_rule_wins(self, topic, style):
		assert get_suggested_style(topic) == style

	def test_rule_order_beats_specificity(self):
		assert get_suggested_style("Nervous system cycle") == "flowchart"


@pytest.mark.unit
class TestDiagramPrompts:
	def test_five_styles_are_listed(self):
		values = [s["value"] for s in list_styles()]

		assert values == list(DIAGRAM_STYLES)
		assert set(values) == {"iconic", "abstract", "flowchart", "illustration", "scientific-diagram"}

	def test_prompt_mentions_topic_and_grade(self):
		prompt, negative = build_diagram_prompt("Food chain", 4, "illustration")

		assert "Food chain" in prompt
		assert "grade 4" in prompt
		assert "text" in negative
