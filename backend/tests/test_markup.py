import pytest

from lesson_gateway.markup import build_markup, escape_ssml

PREFIX = '<speak><prosody rate="medium" pitch="medium">'
SUFFIX = "</prosody></speak>"


@pytest.mark.unit
class TestMarkup:
	def test_wraps_plain_text(self):
		assert build_markup("Hello class") == f"{PREFIX}Hello class{SUFFIX}"

	def test_escapes_ampersand_and_keeps_break(self):
		out = build_markup('Salt & water <break time="500ms"/> mix')

		assert "Salt &amp; water" in out
		assert '<break time="500ms"/>' in out

	def test_escapes_all_reserved_characters(self):
		assert escape_ssml("""a<b>"c"'d'&""") == "a&lt;b&gt;&quot;c&quot;&apos;d&apos;&amp;"

	def test_ampersand_escaped_first(self):
		assert escape_ssml("<") == "&lt;"
		assert escape_ssml("&lt;") == "&amp;lt;"

	def test_placeholder_like_text_is_kept_literally(self):
		out = build_markup('__SSML_TAG_0__ and <break time="1s"/> __SSML_TAG_1__')

		assert out == f'{PREFIX}__SSML_TAG_0__ and <break time="1s"/> __SSML_TAG_1__{SUFFIX}'

	def test_private_use_delimiters_in_input_are_dropped(self):
		out = build_markup('Pause\ue0000\ue001 <break time="1s"/> here')

		assert out == f'{PREFIX}Pause0 <break time="1s"/> here{SUFFIX}'
		assert out.count("<break") == 1
