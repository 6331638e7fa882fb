"""
TaleWeaver CLI.

Commands:
  parse-encounter   Parse a generated encounter into a structured record
  parse-conclusion  Parse an end-of-story message
  image-prompt      Print the image-generation prompt from a message

FILE arguments accept "-" for stdin.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from taleweaver.config import load_parser_settings
from taleweaver.parser.conclusion import ConclusionParser
from taleweaver.parser.encounter import EncounterParser
from taleweaver.parser.models import Encounter
from taleweaver.parser.schema import validate_encounter
from taleweaver.parser.sections import extract_image_prompt
from taleweaver.session import FixedPlayerState, LoggingErrorSink


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _make_state(args):
    if args.stats is None:
        return None
    health, luck, skill = args.stats
    return FixedPlayerState(health=health, luck=luck, skill_modifier=skill)


def _print_encounter(encounter: Encounter, as_json: bool) -> None:
    if as_json:
        print(json.dumps(validate_encounter(encounter), indent=2, ensure_ascii=False))
        return

    print(f"\n{'='*60}")
    print(f"{encounter.number}: {encounter.name}")
    print(f"Mechanic: {encounter.mechanic_kind.value}")
    print(f"Stats: health={encounter.stats.health} luck={encounter.stats.luck} "
          f"skill={encounter.stats.skill_modifier}")
    print(f"{'='*60}")
    if encounter.introduction:
        print(f"\n{encounter.introduction}")
    if encounter.description:
        print(f"\n{encounter.description}")
    if encounter.mechanic_info:
        print(f"\n{encounter.mechanic_info}")
    if encounter.options:
        print()
        for i, option in enumerate(encounter.options, 1):
            outcome = f"  [{option.outcome}]" if option.outcome else ""
            print(f"  {i}. {option.text}{outcome}")
    if encounter.image_prompt_or_path:
        print(f"\nImage: {encounter.image_prompt_or_path}")


def parse_encounter_cmd(args):
    """Parse an encounter narrative."""
    parser = EncounterParser(
        state_provider=_make_state(args),
        error_sink=LoggingErrorSink(),
        settings=load_parser_settings(args.config),
    )
    result = parser.parse(_read_input(args.file), args.image or "")
    if not result.ok:
        print(f"Parse failed: {result.error.message}", file=sys.stderr)
        sys.exit(1)
    if result.missing_markers and not args.json:
        print(f"Missing optional markers: {', '.join(result.missing_markers)}", file=sys.stderr)
    _print_encounter(result.encounter, args.json)


def parse_conclusion_cmd(args):
    """Parse a conclusion message."""
    parser = ConclusionParser(
        state_provider=_make_state(args),
        settings=load_parser_settings(args.config),
    )
    encounter = parser.parse(_read_input(args.file), args.image or "")
    _print_encounter(encounter, args.json)


def image_prompt_cmd(args):
    """Print the image-generation prompt."""
    prompt = extract_image_prompt(_read_input(args.file), conclusion=args.conclusion)
    if prompt is None:
        print("No image prompt found", file=sys.stderr)
        sys.exit(1)
    print(prompt)


def build_parser():
    parser = argparse.ArgumentParser(
        description="TaleWeaver CLI - parse generated story text into encounters"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Parser settings YAML (default: ~/.config/taleweaver/parser.yaml)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    def add_record_args(p):
        p.add_argument("file", help="Message text file, or - for stdin")
        p.add_argument("--image", help="Resolved image path to store on the record")
        p.add_argument(
            "--stats",
            type=int,
            nargs=3,
            metavar=("HEALTH", "LUCK", "SKILL"),
            help="Player stats to snapshot (default: 10 2 0)",
        )
        p.add_argument("--json", action="store_true", help="Output JSON")

    encounter_parser = sub.add_parser("parse-encounter", help="Parse an encounter narrative")
    add_record_args(encounter_parser)
    encounter_parser.set_defaults(func=parse_encounter_cmd)

    conclusion_parser = sub.add_parser("parse-conclusion", help="Parse a conclusion message")
    add_record_args(conclusion_parser)
    conclusion_parser.set_defaults(func=parse_conclusion_cmd)

    image_parser = sub.add_parser("image-prompt", help="Extract the image-generation prompt")
    image_parser.add_argument("file", help="Message text file, or - for stdin")
    image_parser.add_argument("--conclusion", action="store_true", help="Message is a conclusion")
    image_parser.set_defaults(func=image_prompt_cmd)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(2)
    args.func(args)


if __name__ == "__main__":
    main()
