"""Command-line entry point: stream a JSON file through a field projection."""

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path

from loguru import logger

from jsonstream.core.config import Framing, StreamSettings
from jsonstream.core.errors import JsonStreamError
from jsonstream.core.runner import stream_transform
from jsonstream.sources.file import JsonFile
from jsonstream.transforms.mappers import select_fields

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_SOURCE = PACKAGE_DIR / "data" / "data.json"
DEFAULT_DEST = PACKAGE_DIR / "outputData.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonstream",
        description="Stream a JSON array file through a field projection",
    )
    parser.add_argument("source", nargs="?", default=str(DEFAULT_SOURCE),
                        help="Input JSON file (default: bundled data.json)")
    parser.add_argument("dest", nargs="?", default=str(DEFAULT_DEST),
                        help="Output JSON file (default: outputData.json)")
    parser.add_argument("--fields", type=str, default="id,title",
                        help="Comma-separated fields to keep (default: id,title)")
    parser.add_argument("--identity", action="store_true",
                        help="Copy records unchanged instead of projecting fields")
    parser.add_argument("--framing", choices=[f.value for f in Framing], default=None,
                        help="Chunk framing (default: JSONSTREAM_FRAMING or incremental)")
    parser.add_argument("--chunk-size", type=int, default=None,
                        help="Read size per chunk")
    parser.add_argument("--indent", type=int, default=None,
                        help="Indent each output record")
    parser.add_argument("--verify", action="store_true",
                        help="Re-read the output as one JSON document after writing")
    parser.add_argument("--env-file", type=str, default=None,
                        help="Load JSONSTREAM_* settings from this .env file")
    parser.add_argument("--log-level", type=str, default=None,
                        help="Logging level (default: JSONSTREAM_LOG_LEVEL or INFO)")
    return parser


def configure_logging(level: str) -> None:
    """Route loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


async def _run(args: argparse.Namespace) -> None:
    settings = StreamSettings.from_env(args.env_file)
    config = settings.to_run_config()
    overrides = {"indent": args.indent, "close_destination": True}
    if args.framing:
        overrides["framing"] = args.framing
    if args.chunk_size is not None:
        overrides["chunk_size"] = args.chunk_size
    config = replace(config, **overrides)

    configure_logging(args.log_level or config.log_level)

    mapper = None
    if not args.identity:
        fields = [f.strip() for f in args.fields.split(",") if f.strip()]
        mapper = select_fields(*fields)

    result = await stream_transform(args.source, args.dest, mapper, config=config)
    logger.info(
        f"Data piping and transformation completed: {result.records_out} records "
        f"-> {result.dest}"
    )

    if args.verify:
        output = await JsonFile(result.dest).read_all()
        count = len(output) if isinstance(output, list) else 1
        logger.info(f"Verified {result.dest}: {count} records")


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return a process exit code."""
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(_run(args))
    except (JsonStreamError, ValueError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
