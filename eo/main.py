from __future__ import annotations

import argparse
import logging
import sys

from eo.config import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    ConfigError,
    load_config,
    resolve_service_url,
    save_service_url,
)
from eo.log_setup import setup_logging
from eo.parsing import FormatKind, classify
from eo.prompts import build_prompt
from eo.rendering import render_json, render_table, sanitize
from eo.rendering.sanitizer import COLOR_CODES, RESET
from eo.service_client import GenerationClient, GenerationError, ServiceError
from eo.terminal import colors_enabled, read_input, terminal_width

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SERVICE_UNAVAILABLE = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

_STRUCTURED = (FormatKind.JSON, FormatKind.TABLE)


def render_preview(raw: str, kind: FormatKind, width: int) -> str:
    """Render the local preview for structured input, empty for plain text."""
    if kind is FormatKind.JSON:
        return render_json(raw, width)
    if kind is FormatKind.TABLE:
        return render_table(raw, width)
    return ""


def enhance(
    raw: str,
    client: GenerationClient,
    model: str,
    width: int = 80,
    use_colors: bool = True,
) -> str:
    """Classify, preview, generate and sanitize one piece of piped input.

    Args:
        raw: The complete piped input.
        client: Client for the generation service.
        model: Model name passed to the service.
        width: Display width for the preview.
        use_colors: Whether the sanitized reply keeps ANSI styling.

    Returns:
        ``preview + "\\n\\n" + reply`` for JSON and table input, the reply
        alone for plain text. A failed generation shows up as an
        ``Error: ...`` reply rather than an exception.
    """
    kind = classify(raw)
    preview = render_preview(raw, kind, width)

    try:
        reply = client.generate(build_prompt(kind, raw), model)
    except GenerationError as e:
        reply = f"Error: {e}"

    reply = sanitize(reply, use_colors=use_colors)

    if kind in _STRUCTURED:
        return f"{preview}\n\n{reply}"
    return reply


def _use_colors(mode: str) -> bool:
    if mode == "always":
        return True
    if mode == "never":
        return False
    return colors_enabled(sys.stdout)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="eo",
        description="Enhance piped command output with a local AI model",
    )
    parser.add_argument("--url",
                        help="Generation service URL (saved for later runs)")
    parser.add_argument("--model",
                        help="Model name (default: first installed model)")
    parser.add_argument("--width", type=int,
                        help="Display width (default: terminal width)")
    parser.add_argument("--timeout", type=int,
                        help="Generation timeout in seconds")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH,
                        help=f"Path to YAML config file (default: {DEFAULT_CONFIG_PATH})")
    color = parser.add_mutually_exclusive_group()
    color.add_argument("--color", dest="color", action="store_const", const="always",
                       help="Always emit ANSI styling")
    color.add_argument("--no-color", dest="color", action="store_const", const="never",
                       help="Never emit ANSI styling")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug logging on stderr")
    parser.add_argument("--trace", action="store_true",
                        help="Enable trace mode (writes trace file to debug/)")
    parser.add_argument("--verbose", action="store_true",
                        help="With --trace, also send trace output to stderr")
    return parser.parse_args(argv)


def _resolve_url(args: argparse.Namespace, config: AppConfig) -> str:
    url = resolve_service_url(args.url, config)
    if args.url:
        try:
            save_service_url(args.config, url)
        except ConfigError as e:
            logger.warning("Could not save service url: %s", e)
    return url


def _run(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    url = _resolve_url(args, config)
    client = GenerationClient(url, timeout=args.timeout or config.service.timeout)

    try:
        models = client.list_models()
    except ServiceError as e:
        print(f"{COLOR_CODES['red']}{e}{RESET}", file=sys.stderr)
        return EXIT_SERVICE_UNAVAILABLE
    model = client.pick_model(models, args.model or config.service.model)
    logger.info("Using model %s at %s", model, url)

    raw = read_input()
    if not raw:
        print("No input provided.")
        return EXIT_OK

    width = args.width or config.display.width or terminal_width()
    use_colors = _use_colors(args.color or config.display.color)
    print(enhance(raw, client, model, width=width, use_colors=use_colors))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``eo`` command."""
    args = _parse_args(argv)
    setup_logging(debug=args.debug, trace=args.trace, verbose=args.verbose)

    try:
        return _run(args)
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
