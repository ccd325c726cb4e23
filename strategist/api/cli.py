"""
Terminal adapter for the strategic analysis pipeline.

Architectural role:
- Collects the two form inputs and provider settings from flags, files, or stdin.
- Delegates analysis to `strategist.core.engine.process_analysis`.
- Renders the markdown report to stdout or writes it to a file.

Request lifecycle:
1. Parse flags and build `ProviderConfig` from `DEFAULT_SETTINGS`.
2. Prompt for a missing field; read literature from `--literature`, or from
   stdin until EOF when no file is given.
3. Run one analysis.
4. Print/write the report, or print the error.

Exit codes:
- 0: report produced.
- 1: provider or configuration failure.
- 2: blank inputs or unreadable literature file.

Side effects:
- Loads environment variables via `load_dotenv()`.
- Configures root logging from `--log-level`.
"""

from dotenv import load_dotenv

load_dotenv()

import argparse
import logging
import os
import sys

from strategist.core.analysis_types import AnalysisRequest
from strategist.core.engine import InvalidSubmissionError, process_analysis
from strategist.llm.errors import ProviderConfigurationError
from strategist.llm.provider_config import (
    DEFAULT_SETTINGS,
    ProviderKind,
    load_ambient_credential,
    update_settings,
)
from strategist.llm.service import AnalysisDispatcher


logger = logging.getLogger(__name__)


# =========================================================
# UTF-8 SAFE OUTPUT
# Reports are usually Chinese markdown; avoid failing on narrow consoles.
# =========================================================

def configure_stdout(stream) -> None:
    """Switch `stream` to UTF-8, replacing unencodable characters visibly."""
    if hasattr(stream, "reconfigure"):
        try:
            stream.reconfigure(encoding="utf-8", errors="replace")
        except (AttributeError, ValueError):
            pass


configure_stdout(sys.stdout)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="strategist",
        description="Generate a strategic research analysis report from literature metadata.",
    )
    parser.add_argument("--field", help="Research field name.")
    parser.add_argument(
        "--literature",
        help="File with literature rows (year, venue, title). Use '-' or omit to read stdin.",
    )
    parser.add_argument(
        "--provider",
        choices=[kind.value for kind in ProviderKind],
        default=DEFAULT_SETTINGS.provider.value,
    )
    parser.add_argument("--model", dest="model_name", help="Model name.")
    parser.add_argument("--base-url", dest="base_url", help="OpenAI-compatible base URL.")
    parser.add_argument("--api-key", dest="api_key", help="Provider API key.")
    parser.add_argument("--output", help="Write the report to this file instead of stdout.")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def read_literature(path) -> str:
    """Read literature rows from `path`, or from stdin when `path` is empty or '-'."""
    if path and path != "-":
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    if sys.stdin.isatty():
        print("Paste literature data (year, venue, title per line). Finish with Ctrl-D:")
    return sys.stdin.read()


def resolve_settings(args):
    """Build provider settings from flags on top of the defaults."""
    api_key = args.api_key
    if api_key is None and args.provider == ProviderKind.OPENAI.value:
        api_key = os.getenv("OPENAI_API_KEY")

    model_name = args.model_name
    if model_name is None and args.provider == ProviderKind.OPENAI.value:
        # The Gemini default model makes no sense for an OpenAI-compatible endpoint.
        model_name = ""

    return update_settings(
        DEFAULT_SETTINGS,
        provider=args.provider,
        api_key=api_key,
        base_url=args.base_url,
        model_name=model_name,
    )


def main(argv=None) -> int:
    """Run one analysis from the command line and return the exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    field = args.field
    if not field:
        try:
            field = input("Research field: ").strip()
        except EOFError:
            field = ""

    try:
        literature_data = read_literature(args.literature)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Cannot read literature file: {exc}", file=sys.stderr)
        return 2

    try:
        settings = resolve_settings(args)
    except ProviderConfigurationError as exc:
        print(exc.message, file=sys.stderr)
        return 1

    dispatcher = AnalysisDispatcher(ambient_credential=load_ambient_credential())
    request = AnalysisRequest(field=field, literature_data=literature_data, settings=settings)

    try:
        outcome = process_analysis(request, dispatcher)
    except InvalidSubmissionError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    if not outcome.ok:
        print(f"Analysis failed: {outcome.error}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(outcome.report)
        print(f"Report written to {args.output}")
    else:
        print(outcome.report)

    return 0


if __name__ == "__main__":
    sys.exit(main())
