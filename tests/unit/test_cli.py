"""Tests for the taleweaver command line."""

import io
import json

import pytest
import yaml

from taleweaver.cli.main import build_parser, main
from tests.fixtures.narratives import (
    COMBAT_BLOCK,
    DEFAULT_IMAGE_PROMPT,
    make_conclusion,
    make_narrative,
)


@pytest.fixture
def narrative_file(tmp_path):
    path = tmp_path / "page1.txt"
    path.write_text(make_narrative(), encoding="utf-8")
    return path


@pytest.fixture
def conclusion_file(tmp_path):
    path = tmp_path / "end.txt"
    path.write_text(make_conclusion(), encoding="utf-8")
    return path


class TestParseEncounterCommand:
    def test_text_output(self, narrative_file, capsys):
        main(["parse-encounter", str(narrative_file)])
        out = capsys.readouterr().out
        assert "ADV01: The Dark Gate" in out
        assert "Mechanic: PlainOptions" in out
        assert "1. Open the door  [You find a key]" in out

    def test_json_output(self, narrative_file, capsys):
        main(["parse-encounter", str(narrative_file), "--json", "--image", "page1.png"])
        record = json.loads(capsys.readouterr().out)
        assert record["number"] == "ADV01"
        assert record["image_prompt_or_path"] == "page1.png"
        assert record["image_prompt"] == DEFAULT_IMAGE_PROMPT
        assert record["stats"] == [10, 2, 0]

    def test_stats_argument(self, narrative_file, capsys):
        main(["parse-encounter", str(narrative_file), "--json", "--stats", "5", "1", "-1"])
        assert json.loads(capsys.readouterr().out)["stats"] == [5, 1, -1]

    def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(make_narrative(COMBAT_BLOCK)))
        main(["parse-encounter", "-", "--json"])
        record = json.loads(capsys.readouterr().out)
        assert record["mechanic_kind"] == "Combat"
        assert record["options"] == [{"text": "Combat with Bridge Troll", "outcome": "14"}]

    def test_config_file_applied(self, narrative_file, tmp_path, capsys):
        config = tmp_path / "parser.yaml"
        config.write_text(yaml.safe_dump({"introduction_max_words": 2}))
        main(["--config", str(config), "parse-encounter", str(narrative_file), "--json"])
        assert json.loads(capsys.readouterr().out)["introduction"] == "The mist..."

    def test_missing_markers_reported(self, tmp_path, capsys):
        path = tmp_path / "wolf.txt"
        path.write_text(make_narrative("##Combat##\n##Name## Wolf"), encoding="utf-8")
        main(["parse-encounter", str(path)])
        assert "Missing optional markers: ##Diff##" in capsys.readouterr().err

    def test_failure_exits_nonzero(self, tmp_path, capsys):
        path = tmp_path / "bad.txt"
        path.write_text("no header here", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["parse-encounter", str(path)])
        assert exc.value.code == 1
        assert "Parse failed: Encounter header line not found" in capsys.readouterr().err


class TestParseConclusionCommand:
    def test_json_output(self, conclusion_file, capsys):
        main(["parse-conclusion", str(conclusion_file), "--json", "--stats", "3", "2", "1"])
        record = json.loads(capsys.readouterr().out)
        assert record["number"] == "Conclusion"
        assert record["mechanic_kind"] == "None"
        assert record["options"] == []
        assert record["stats"] == [3, 2, 1]


class TestImagePromptCommand:
    def test_encounter_prompt(self, narrative_file, capsys):
        main(["image-prompt", str(narrative_file)])
        assert capsys.readouterr().out.strip() == DEFAULT_IMAGE_PROMPT

    def test_conclusion_prompt(self, conclusion_file, capsys):
        main(["image-prompt", str(conclusion_file), "--conclusion"])
        assert capsys.readouterr().out.strip() == "A sunrise over a small village"

    def test_missing_prompt(self, tmp_path, capsys):
        path = tmp_path / "plain.txt"
        path.write_text("Nothing to see", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["image-prompt", str(path)])
        assert exc.value.code == 1
        assert "No image prompt found" in capsys.readouterr().err


class TestParserConstruction:
    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2
        assert "parse-encounter" in capsys.readouterr().out

    def test_subcommands_registered(self):
        args = build_parser().parse_args(["parse-conclusion", "end.txt", "--image", "x.png"])
        assert args.command == "parse-conclusion"
        assert args.image == "x.png"
        assert args.stats is None
