"""
Diagram relevance policy.

Decides whether a topic is visual enough to justify an image-generation call,
and which rendering style suits it. Both checks are plain case-insensitive
substring tests ("cell" also matches "cellular"); the first match wins and the
style rules are evaluated in a fixed order, so a topic such as "nervous system
cycle" resolves to a flowchart before the scientific-diagram rule is reached.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

# ============================================================================
# KEYWORDS
# ============================================================================

VISUAL_KEYWORDS: Tuple[str, ...] = (
	# Biology
	"photosynthesis", "cells", "cellular", "cell division", "cell membrane", "cell wall",
	"organs", "organism", "tissue", "heart", "lung", "brain", "kidney",
	"digest", "respirat", "circulat", "skeleton", "muscle", "nerves", "neuron", "blood",
	"plant", "flower", "leaf", "roots", "seeds", "germination", "pollination",
	"animal", "insect", "bird", "fishes", "mammal", "reptile", "amphibian",
	"ecosystem", "food chain", "food web", "habitat", "life cycle", "reproduction",
	"dna", "genes", "genetic", "heredity", "chromosome", "evolution", "bacteria", "virus",
	"microorganism",
	# Physics
	"forces", "laws of motion", "projectile", "circular motion", "gravity", "magnet",
	"electric", "circuit", "light energy", "light ray", "speed of light", "spectrum",
	"reflection", "refraction", "lens", "mirror", "sound waves", "waves",
	"energy", "heat transfer", "heating", "conduction", "convection", "temperature",
	"air pressure", "water pressure", "friction", "levers", "pulley",
	"simple machine", "newton", "velocity", "acceleration",
	# Chemistry
	"atom", "molecule", "elements", "chemical element", "compound", "mixture",
	"periodic table", "chemical reaction", "acid", "salt", "chemical bond", "covalent",
	"ionic", "electron", "proton", "neutron", "states of matter", "solid", "liquid",
	"gases", "evaporation", "condensation", "combustion",
	# Earth and space science
	"water cycle", "rock cycle", "volcano", "earthquake", "tectonic", "weather",
	"climate", "cloud", "rainfall", "rainbow", "soil", "erosion", "river", "ocean",
	"mountain", "planet", "solar system", "moon", "sunlight", "the sun", "sunrise",
	"sunset", "stars", "galaxy", "eclipse", "season", "atmosphere", "layers of the earth",
	# Geometry and maths visuals
	"triangle", "circle", "square", "rectangle", "polygon", "right angle", "acute angle",
	"obtuse", "shapes", "geometry", "symmetry", "graphs", "bar graph", "line graph",
	"pie chart", "fraction", "surface area", "perimeter", "volume", "pythagoras",
	# Technology
	"computer", "network", "internet", "robot", "engine", "machine", "rocket",
	"satellite", "battery", "generator", "motor", "algorithm",
	# Generic process terms
	"cycle", "process", "system", "structure", "diagram", "flow", "stages",
	"parts of", "layers", "anatomy",
)

# ============================================================================
# STYLES
# ============================================================================

FLOWCHART = "flowchart"
ILLUSTRATION = "illustration"
SCIENTIFIC = "scientific-diagram"
ABSTRACT = "abstract"
ICONIC = "iconic"

# Ordered: only the first matching rule applies
STYLE_RULES: List[Tuple[Tuple[str, ...], str]] = [
	(("cycle", "process", "algorithm"), FLOWCHART),
	(("animal", "plant", "ecosystem"), ILLUSTRATION),
	(("cell", "atom", "system", "organ", "reproduction"), SCIENTIFIC),
	(("concept", "relationship"), ABSTRACT),
]

_NO_TEXT = "text, letters, words, labels"

DIAGRAM_STYLES: Dict[str, Dict[str, str]] = {
	ICONIC: {
		"label": "Icon-Based",
		"description": "Simple icons and symbols without text",
		"prompt": (
			"Clean icon diagram showing {topic}, simple geometric icons, arrows showing relationships, "
			"minimalist flat design, pastel color palette, white background, infographic style, "
			"no text, visual only, suitable for educational presentation"
		),
		"negative": f"{_NO_TEXT}, complex details, realistic, photographic",
	},
	ABSTRACT: {
		"label": "Abstract Shapes",
		"description": "Flowing shapes showing relationships",
		"prompt": (
			"Abstract visual representation of {topic}, flowing shapes and connecting lines, "
			"modern minimal design, color-coded elements, clean composition, white background, "
			"educational infographic aesthetic, geometric abstraction"
		),
		"negative": f"{_NO_TEXT}, realistic, photographic, cluttered, detailed",
	},
	FLOWCHART: {
		"label": "Flowchart",
		"description": "Boxes and arrows showing process",
		"prompt": (
			"Flowchart visualization of {topic}, colored rectangular boxes connected by arrows, "
			"organized hierarchical layout, clean modern design, white background, simple flat style, "
			"process flow diagram, minimal aesthetic"
		),
		"negative": f"{_NO_TEXT}, text inside boxes, realistic, complex, photographic",
	},
	ILLUSTRATION: {
		"label": "Illustration",
		"description": "Friendly cartoon-style visual",
		"prompt": (
			"Educational illustration of {topic}, simple cartoon style, clear visual metaphor, "
			"bright colors, white background, friendly design for grade {grade} students, "
			"vector art style, clean lines"
		),
		"negative": f"{_NO_TEXT}, realistic photo, complex details, messy",
	},
	SCIENTIFIC: {
		"label": "Scientific Diagram",
		"description": "Textbook-style cross-section or structure view",
		"prompt": (
			"Textbook scientific diagram of {topic}, clear cross-section or structural view, "
			"distinct color-coded parts, clean outlines, white background, accurate proportions, "
			"suitable for grade {grade} science class"
		),
		"negative": f"{_NO_TEXT}, photographic, artistic blur, cluttered background",
	},
}


def needs_visual_diagram(topic: str) -> bool:
	"""Return True when the topic mentions any visual keyword."""
	text = (topic or "").lower()
	return any(keyword in text for keyword in VISUAL_KEYWORDS)


def get_suggested_style(topic: str) -> str:
	text = (topic or "").lower()
	for keywords, style in STYLE_RULES:
		if any(keyword in text for keyword in keywords):
			return style
	return ICONIC


def build_diagram_prompt(topic: str, grade: int, style: str) -> Tuple[str, str]:
	"""Return the (prompt, negative prompt) pair for a style."""
	entry = DIAGRAM_STYLES[style]
	return entry["prompt"].format(topic=topic, grade=grade), entry["negative"]


def list_styles() -> List[Dict[str, str]]:
	return [
		{"value": value, "label": entry["label"], "description": entry["description"]}
		for value, entry in DIAGRAM_STYLES.items()
	]
