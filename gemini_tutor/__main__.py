"""Command line entry point: ``python -m gemini_tutor``.

``ingest`` runs normalization, repair and parsing over raw model output read
from a file or stdin. ``analyze`` runs the content-analysis call site on an
image, using the mock endpoint unless ``GEMINI_USE_REAL_API`` is set.
"""

import argparse
import asyncio
import json
import logging
import mimetypes
from pathlib import Path
import sys

from .config import load_settings
from .exceptions import GeminiTutorError
from .models import Interest, Language, Mood, UserSettings
from .response import parse_response_text
from .tutor import TutorService

log = logging.getLogger(__name__)


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _cmd_ingest(args: argparse.Namespace) -> int:
    result = parse_response_text(_read_source(args.source))
    if args.show_method:
        print(f"method: {result.method}", file=sys.stderr)
    print(json.dumps(result.parsed_data, indent=2, ensure_ascii=False))
    return 0


def _cmd_analyze(args: argparse.Namespace) -> int:
    path = Path(args.image)
    mime_type = args.mime_type or mimetypes.guess_type(path.name)[0]
    if not mime_type:
        print(f"Could not determine a MIME type for {path}", file=sys.stderr)
        return 2

    settings = load_settings(env_file=args.env_file)
    user_settings = UserSettings(
        mood=Mood(args.mood),
        language=Language(args.language),
        interest=Interest(args.interest),
    )
    service = TutorService(settings=settings)
    result = asyncio.run(
        service.analyze_content(path.read_bytes(), mime_type, user_settings)
    )
    print(result.model_dump_json(by_alias=True, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ingest generative model output for the Gemini tutor",
        prog="python -m gemini_tutor",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest_parser = subparsers.add_parser(
        "ingest", help="Normalize, repair and parse raw model output"
    )
    ingest_parser.add_argument(
        "source", nargs="?", default="-", help="File to read ('-' for stdin)"
    )
    ingest_parser.add_argument(
        "--show-method",
        action="store_true",
        help="Report whether the text parsed directly or after repair",
    )
    ingest_parser.set_defaults(handler=_cmd_ingest)

    analyze_parser = subparsers.add_parser(
        "analyze", help="Turn an image into a story, quiz, flashcards and mind map"
    )
    analyze_parser.add_argument("image", help="Image or document to analyze")
    analyze_parser.add_argument("--mime-type", help="Override the guessed MIME type")
    analyze_parser.add_argument(
        "--mood", choices=[m.value for m in Mood], default=Mood.BALANCED.value
    )
    analyze_parser.add_argument(
        "--language",
        choices=[lang.value for lang in Language],
        default=Language.ENGLISH.value,
    )
    analyze_parser.add_argument(
        "--interest", choices=[i.value for i in Interest], default=Interest.NONE.value
    )
    analyze_parser.add_argument("--env-file", help="Optional .env file to load")
    analyze_parser.set_defaults(handler=_cmd_analyze)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ingestion and analysis."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.handler(args)
    except (GeminiTutorError, ValueError, OSError) as e:
        log.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
