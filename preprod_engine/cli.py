"""preprod-engine CLI entry point."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

FALLBACK_TYPES = (
    "auto",
    "episode",
    "script-expansion",
    "marketing",
    "postProduction",
    "storyboard",
    "props",
    "generic",
)

# Mirrors preprod_engine.client.GENERATION_ENDPOINTS plus the image endpoint.
GENERATION_KINDS = (
    "questionnaire",
    "equipment",
    "budget",
    "locations",
    "casting",
    "props-wardrobe",
    "storyboards",
    "episode-marketing",
    "episode-thumbnail",
    "image",
)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="preprod-engine",
        description="Pre-production engine: model output recovery and script breakdown",
    )
    parser.add_argument(
        "--log-level", default=None, metavar="LEVEL",
        help="Logging level (default: $PREPROD_LOG_LEVEL or INFO)",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    parse_parser = sub.add_parser("parse", help="Recover a JSON value from model output")
    parse_parser.add_argument(
        "--input", required=True, metavar="response.txt",
        help="Path to the raw model output",
    )
    parse_parser.add_argument(
        "--fallback", choices=FALLBACK_TYPES, default=None,
        help="Print a fallback structure instead of failing ('auto' detects the type)",
    )

    array_parser = sub.add_parser("parse-array", help="Recover an array of objects from model output")
    array_parser.add_argument(
        "--input", required=True, metavar="response.txt",
        help="Path to the raw model output",
    )
    array_parser.add_argument(
        "--key", default="sceneNumber",
        help="Key every salvaged object must carry (default: sceneNumber)",
    )

    structure_parser = sub.add_parser(
        "structure-breakdown",
        help="Build a ScriptBreakdown from a breakdown response and its script",
    )
    structure_parser.add_argument(
        "--response", required=True, metavar="response.txt",
        help="Path to the raw breakdown response",
    )
    structure_parser.add_argument(
        "--script", required=True, metavar="script.json",
        help="Path to the GeneratedScript JSON the breakdown was made from",
    )
    structure_parser.add_argument("--episode", required=True, type=int, help="Episode number")
    structure_parser.add_argument("--title", required=True, help="Episode title")
    structure_parser.add_argument(
        "--output", required=True, metavar="breakdown.json",
        help="Destination path for the ScriptBreakdown JSON",
    )
    structure_parser.add_argument(
        "--story-bible-id", default=None, metavar="ID",
        help="Also save the breakdown as the episode's scriptBreakdown tab under $PREPROD_DATA_DIR",
    )

    generate_parser = sub.add_parser("generate", help="Call a generation endpoint and print its JSON")
    generate_parser.add_argument("--kind", required=True, choices=GENERATION_KINDS, help="Endpoint to call")
    generate_parser.add_argument(
        "--payload", required=True, metavar="payload.json",
        help="Path to the JSON request body",
    )

    inventory_parser = sub.add_parser("inventory", help="Show or clear the owned-equipment inventory")
    inventory_parser.add_argument("--story-bible-id", required=True, metavar="ID")
    inventory_parser.add_argument("--clear", action="store_true", help="Forget every owned item")
    args = parser.parse_args()

    from preprod_engine.config import load_settings
    from preprod_engine.logging_utils import setup_logging
    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)
    setup_logging(level=args.log_level or settings.log_level)

    if args.command == "parse":
        _run_parse(Path(args.input), args.fallback)
    elif args.command == "parse-array":
        _run_parse_array(Path(args.input), args.key)
    elif args.command == "structure-breakdown":
        _run_structure(
            Path(args.response), Path(args.script), args.episode, args.title, Path(args.output),
            story_bible_id=args.story_bible_id,
            documents_dir=settings.documents_dir,
        )
    elif args.command == "generate":
        _run_generate(settings, args.kind, Path(args.payload))
    elif args.command == "inventory":
        _run_inventory(settings, args.story_bible_id, args.clear)
    else:
        parser.print_help()
        sys.exit(1)


def _print_json(value) -> None:
    print(json.dumps(value, sort_keys=True, indent=2, ensure_ascii=False))


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"ERROR: cannot read {path}: {exc.strerror or exc}")
        sys.exit(1)


def _run_parse(input_path: Path, fallback: str | None) -> None:
    from preprod_engine.recovery import ParseFailure, clean_and_parse_json, parse_with_fallback

    raw = _read_text(input_path)
    if fallback is not None:
        _print_json(parse_with_fallback(raw, None if fallback == "auto" else fallback))
        sys.exit(0)
    try:
        value = clean_and_parse_json(raw)
    except ParseFailure as exc:
        print(str(exc))
        sys.exit(1)
    _print_json(value)
    sys.exit(0)


def _run_parse_array(input_path: Path, item_key: str) -> None:
    from preprod_engine.recovery import ParseFailure, clean_and_parse_json_array

    raw = _read_text(input_path)
    try:
        items = clean_and_parse_json_array(raw, item_key)
    except ParseFailure as exc:
        print(str(exc))
        sys.exit(1)
    _print_json(items)
    sys.exit(0)


def _run_structure(
    response_path: Path,
    script_path: Path,
    episode_number: int,
    title: str,
    output_path: Path,
    *,
    story_bible_id: str | None = None,
    documents_dir: Path | None = None,
) -> None:
    """Structure a breakdown and write it; the output is never written on failure."""
    import jsonschema  # noqa: PLC0415
    from pydantic import ValidationError
    from preprod_engine.breakdown import GeneratedScript, parse_script_to_scenes, structure_breakdown
    from preprod_engine.schemas.breakdown_v1 import dump_breakdown

    response = _read_text(response_path)
    try:
        script = GeneratedScript.model_validate_json(_read_text(script_path))
    except ValidationError as exc:
        print(f"ERROR: invalid GeneratedScript ({exc.error_count()} error(s))")
        sys.exit(1)

    try:
        breakdown = structure_breakdown(
            response, parse_script_to_scenes(script), episode_number, title
        )
    except jsonschema.ValidationError as exc:
        print(f"ERROR: invalid breakdown scenes: {exc.message}")
        sys.exit(1)
    except ValueError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    text = dump_breakdown(breakdown)
    output_path.write_text(text + "\n", encoding="utf-8")
    print(f"OK: wrote {breakdown.total_scenes} scene(s) to {output_path}")
    if story_bible_id:
        from studio.project_store import on_update

        on_update(story_bible_id, documents_dir, episode_number, "scriptBreakdown", json.loads(text))
        print(f"OK: saved scriptBreakdown for {story_bible_id} episode {episode_number}")
    sys.exit(0)


def _run_generate(settings, kind: str, payload_path: Path) -> None:
    import requests
    from preprod_engine.client import GenerationClient, GenerationError
    from preprod_engine.recovery import ParseFailure

    try:
        payload = json.loads(_read_text(payload_path))
    except ValueError as exc:
        print(f"ERROR: invalid payload JSON: {exc}")
        sys.exit(1)
    if not isinstance(payload, dict):
        print("ERROR: payload must be a JSON object")
        sys.exit(1)

    client = GenerationClient.from_settings(settings)
    try:
        if kind == "image":
            value = client.generate_image(payload)
        else:
            value = client.generate(kind, payload)
    except (GenerationError, ParseFailure) as exc:
        print(str(exc))
        sys.exit(1)
    except requests.RequestException as exc:
        print(f"ERROR: request to {settings.api_base_url} failed: {exc}")
        sys.exit(1)
    _print_json(value)
    sys.exit(0)


def _run_inventory(settings, story_bible_id: str, clear: bool) -> None:
    from studio.inventory import JsonFileStore, clear_inventory, load_inventory

    store = JsonFileStore(settings.inventory_dir / "inventory.json")
    if clear:
        clear_inventory(store, story_bible_id)
        print(f"OK: cleared inventory for {story_bible_id}")
    else:
        _print_json(load_inventory(store, story_bible_id))
    sys.exit(0)


if __name__ == "__main__":
    main()
