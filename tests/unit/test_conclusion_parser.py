"""Tests for the Conclusion Parser."""

from taleweaver.config import ParserSettings
from taleweaver.parser.conclusion import ConclusionParser
from taleweaver.parser.models import MechanicKind, StatsSnapshot
from taleweaver.session import NoPlayerState
from tests.fixtures.narratives import make_conclusion


class TestConclusionParser:
    def test_name_and_introduction(self, conclusion_parser):
        encounter = conclusion_parser.parse(make_conclusion(), "end.png")
        assert encounter.number == "Conclusion"
        assert encounter.name == "The End"
        assert encounter.introduction == "You return home at dawn. The village cheers your name."
        assert encounter.image_prompt_or_path == "end.png"

    def test_terminal_record(self, conclusion_parser):
        encounter = conclusion_parser.parse(make_conclusion())
        assert encounter.mechanic_kind == MechanicKind.NONE
        assert encounter.is_conclusion
        assert encounter.options == ()
        assert encounter.mechanic_info == ""
        assert encounter.description == ""

    def test_unwrapped_message(self, conclusion_parser):
        encounter = conclusion_parser.parse(make_conclusion(wrapped=False))
        assert encounter.introduction == "You return home at dawn. The village cheers your name."

    def test_inline_wrapper_removed(self, conclusion_parser):
        message = "### Conclusion: Home\n^^conclusion^^ You made it.\n^^conclusion image description^^\nx"
        assert conclusion_parser.parse(message).introduction == "You made it."

    def test_image_description_not_included(self, conclusion_parser):
        encounter = conclusion_parser.parse(make_conclusion(image_description="A sunrise"))
        assert "sunrise" not in encounter.introduction

    def test_parentheticals_stripped(self, conclusion_parser):
        message = make_conclusion(name="The End (finale)", body=("You won (barely).",))
        encounter = conclusion_parser.parse(message)
        assert encounter.name == "The End"
        assert encounter.introduction == "You won."

    def test_no_markers_yields_empty_name(self, conclusion_parser):
        encounter = conclusion_parser.parse("Just a closing line.")
        assert encounter.name == ""
        assert encounter.introduction == "Just a closing line."

    def test_empty_message(self, conclusion_parser):
        encounter = conclusion_parser.parse("")
        assert encounter.name == ""
        assert encounter.introduction == ""

    def test_live_stats(self, conclusion_parser):
        assert conclusion_parser.parse(make_conclusion()).stats == StatsSnapshot(7, 4, 1)

    def test_defaults_without_live_session(self, caplog):
        parser = ConclusionParser(state_provider=NoPlayerState(), settings=ParserSettings())
        with caplog.at_level("WARNING"):
            encounter = parser.parse(make_conclusion())
        assert encounter.stats.as_tuple() == (10, 2, 0)
        assert "default stats" in caplog.text
