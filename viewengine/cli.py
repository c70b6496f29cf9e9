#!/usr/bin/env python3
"""
ViewEngine REST API demo: discover MCP tools, submit a retrieval, poll for the
result and optionally download the page data.

Run from project root:

    viewengine-demo <api-key>
    viewengine-demo              (you'll be prompted for the API key)
    python -m viewengine.cli <api-key> --base-url http://localhost:5072

The key can also be set as VIEWENGINE_API_KEY in the environment or .env.
"""

import argparse
import json
import logging
import sys
import traceback
from typing import Any

from viewengine.core.config import (
    API_BASE_URL,
    DEFAULT_MODE,
    DEFAULT_URL,
    LOG_LEVEL,
    PREVIEW_CHARS,
    VIEWENGINE_API_KEY,
)
from viewengine.core.errors import (
    DecodeError,
    FetchError,
    HttpStatusError,
    PollTimeoutError,
    SubmissionError,
    ToolDiscoveryError,
    ViewEngineError,
)
from viewengine.schemas.retrieval import RetrievalRequest, RetrievalResult
from viewengine.services.retrieval_client import RetrievalClient

logger = logging.getLogger(__name__)

RULE = "━" * 58

USAGE = """Usage:
  viewengine-demo <api-key>
  OR
  viewengine-demo   (you'll be prompted for the API key)"""


def _ask(prompt: str) -> str:
    """Read one answer from stdin; closed stdin counts as a blank answer."""
    try:
        return input(prompt).strip()
    except EOFError:
        return ""


def _print_banner() -> None:
    print("╔══════════════════════════════════════════════════════════╗")
    print("║          ViewEngine REST API Demo (Python)               ║")
    print("║  Demonstrates using the MCP endpoints with an API key    ║")
    print("╚══════════════════════════════════════════════════════════╝")
    print()


def _print_attempt(
    attempt: int, max_attempts: int, result: RetrievalResult | None, error: ViewEngineError | None
) -> None:
    prefix = f"   [{attempt}/{max_attempts}]"
    if result is not None:
        print(f"{prefix} Status: {result.status} - {result.message or ''}")
        if result.is_terminal and not result.is_complete:
            print(f"   Error: {result.error or ''}")
    elif isinstance(error, HttpStatusError):
        print(f"{prefix} HTTP Error: {error.status_code}")
    elif isinstance(error, DecodeError):
        print(f"{prefix} Failed to decode response")
    else:
        print(f"{prefix} Error: {error.message if error else 'unknown'}")


def format_preview(document: Any, limit: int = PREVIEW_CHARS) -> str:
    """Pretty-print a JSON document, truncated to `limit` characters."""
    pretty = json.dumps(document, indent=2, ensure_ascii=False)
    if len(pretty) > limit:
        return pretty[:limit] + "..."
    return pretty


def prompt_request() -> RetrievalRequest:
    """Ask for URL, refresh flag and mode; blank answers take the defaults."""
    url = _ask(f"Enter a URL to retrieve (or press Enter for {DEFAULT_URL}): ") or DEFAULT_URL
    force_refresh = _ask(
        "\nForce fresh retrieval? (y/n, default: n - use cache if available): "
    ).lower() == "y"
    mode_input = _ask(f"\nProcessing mode (private/community, default: {DEFAULT_MODE}): ").lower()
    mode = "community" if mode_input == "community" else DEFAULT_MODE
    return RetrievalRequest(url=url, force_refresh=force_refresh, mode=mode)


def download_page_data(client: RetrievalClient, page_data_url: str) -> None:
    print("\n⬇️  Downloading page content...")
    try:
        document = client.fetch_content(page_data_url)
    except FetchError as e:
        logger.warning("[cli:download_page_data] %s", e.message)
        print(e.message)
        return
    print(f"\n📄 Page Content (first {PREVIEW_CHARS} chars):")
    print(RULE)
    print(format_preview(document))
    print(RULE)


def run_demo(client: RetrievalClient) -> bool:
    """Run the demo steps in order. Returns True when every step finished."""
    print("🔍 Step 1: Discovering available MCP tools...\n")
    try:
        tools = client.list_tools()
    except ToolDiscoveryError as e:
        print(e.message)
        tools = []
    if tools:
        print(f"✅ Found {len(tools)} available tools:")
        for tool in tools:
            print(f"   • {tool.name}: {tool.description}")
    else:
        print("⚠️  No tools found or API not responding")

    print(f"\n{RULE}\n")
    request = prompt_request()

    print(f"\n🌐 Step 2: Submitting retrieval request for {request.url}...")
    if request.force_refresh:
        print("   (Forcing fresh retrieval, bypassing cache)")
    else:
        print("   (Will use cached results if available)")
    print(f"   Mode: {request.mode}\n")

    try:
        ack = client.submit_retrieval(request)
    except SubmissionError as e:
        print(e.message)
        print("❌ Failed to submit retrieval request")
        return False

    print("✅ Request submitted successfully!")
    print(f"   Request ID: {ack.request_id}")
    print(f"   Status: {ack.status or ''}")
    print(f"   Estimated wait: {ack.estimated_wait_time_seconds}s")

    print(f"\n{RULE}\n")
    print("⏳ Step 3: Polling for results (this may take a while)...\n")
    try:
        result = client.poll_retrieval(ack.request_id, on_attempt=_print_attempt)
    except PollTimeoutError as e:
        logger.warning("[cli:run_demo] %s", e.message)
        print("⚠️  Timeout: Maximum polling attempts reached")
        print("❌ Failed to get results")
        return False

    print("✅ Retrieval completed!")
    print(f"   Status: {result.status}")
    print(f"   URL: {result.url or ''}")
    print(f"   Completed at: {result.completed_at or ''}")

    content = result.content if result.is_complete else None
    if content is not None:
        print("\n📄 Content available:")
        print(f"   Page Data URL: {content.page_data_url}")
        print(f"   Content Hash: {content.content_hash}")
        if content.artifacts:
            print(f"   Artifacts: {', '.join(content.artifacts)}")
        if content.metrics:
            print(f"   Metrics: {', '.join(content.metrics)}")
        if _ask("\nDownload page content? (y/n): ").lower() == "y":
            download_page_data(client, content.page_data_url)

    print(f"\n{RULE}\n")
    print("✅ Demo completed successfully!")
    return True


def run(client: RetrievalClient) -> bool:
    """Run the demo and report any escaping error with its trace instead of crashing."""
    _print_banner()
    try:
        return run_demo(client)
    except Exception as e:
        logger.exception("Demo failed")
        print(f"❌ Error: {e}\n")
        print("Stack trace:")
        traceback.print_exc(file=sys.stdout)
        return False


def resolve_api_key(cli_key: str | None) -> str:
    """Command-line argument first, then VIEWENGINE_API_KEY, then an interactive prompt."""
    if cli_key and cli_key.strip():
        return cli_key.strip()
    if VIEWENGINE_API_KEY:
        return VIEWENGINE_API_KEY
    return _ask("Enter your API key: ")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="viewengine-demo",
        description="ViewEngine REST API demo using the MCP endpoints with an API key.",
    )
    parser.add_argument("api_key", nargs="?", help="ViewEngine API key (prompted for when omitted).")
    parser.add_argument(
        "--base-url",
        default=API_BASE_URL,
        help=f"API base URL (default: {API_BASE_URL}).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--no-wait",
        action="store_true",
        help="Exit without waiting for Enter at the end.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    log_level = logging.INFO if args.verbose else getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    api_key = resolve_api_key(args.api_key)
    if not api_key:
        print("❌ Error: API key is required\n")
        print(USAGE)
        return 1

    with RetrievalClient(api_key, base_url=args.base_url) as client:
        run(client)

    if not args.no_wait:
        _ask("\nPress Enter to exit...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
