"""
ReportAgent CLI entry point.

Provides command-line access to the tool-calling agent and utility commands.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from reportagent import __version__
from reportagent.components import AgentComponents
from reportagent.config.logging import get_logger, setup_logging
from reportagent.config.settings import Settings, load_settings
from reportagent.llm.models import ModelUnavailableError
from reportagent.tools.base import ToolExecutionError
from reportagent.tools.registry import ConfigurationError, UnresolvedToolError


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog="reportagent",
        description="LLM reporting assistant that can fetch cleaning data through tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"ReportAgent {__version__}",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: .env in current directory)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level from config",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "config",
        help="Show current configuration",
    )

    subparsers.add_parser(
        "tools",
        help="List the tools offered to the model",
    )

    ask_parser = subparsers.add_parser(
        "ask",
        help="Send a request to the agent (the model may call one tool)",
    )
    ask_parser.add_argument(
        "prompt",
        help='Request text, e.g. "show last week\'s cleaning report"',
    )

    report_parser = subparsers.add_parser(
        "report",
        help="Print cleaning records for a date range as JSON (no model call)",
    )
    report_parser.add_argument(
        "--start",
        default=None,
        help="Start date YYYY-MM-DD (default: DATA__DEFAULT_WINDOW_DAYS before today)",
    )
    report_parser.add_argument(
        "--end",
        default=None,
        help="End date YYYY-MM-DD, inclusive (default: today)",
    )

    call_tool_parser = subparsers.add_parser(
        "call-tool",
        help="Execute one registered tool directly and print its JSON result",
    )
    call_tool_parser.add_argument(
        "name",
        help="Tool name, e.g. get_cleaning_report",
    )
    call_tool_parser.add_argument(
        "--args",
        default="{}",
        help='Tool arguments as a JSON object, e.g. \'{"startDate": "2024-01-01"}\'',
    )

    return parser


def cmd_config(settings: Settings) -> int:
    """Show current configuration."""
    logger = get_logger(__name__)

    logger.info("\n=== ReportAgent Configuration ===\n")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Log Level: {settings.log_level}")
    logger.info(f"Log File: {settings.log_file or 'None (console only)'}")
    logger.info(f"\nLLM Model: {settings.llm.model}")
    logger.info(f"LLM API Key: {'Set' if settings.llm.api_key else 'Not set'}")
    logger.info(f"LLM Temperature: {settings.llm.temperature if settings.llm.temperature is not None else 'provider default'}")
    logger.info(f"\nMax Output Tokens: {settings.generation.max_output_tokens}")
    logger.info(f"Candidate Count: {settings.generation.candidate_count}")
    logger.info(f"Thinking Budget: {settings.generation.thinking_budget}")
    logger.info(f"\nCleaning Data: {settings.data.cleaning_data_path}")
    logger.info(f"Default Report Window: {settings.data.default_window_days} days")

    return 0


def cmd_tools(settings: Settings) -> int:
    """List registered tools and their parameters."""
    logger = get_logger(__name__)

    try:
        registry = AgentComponents(settings).create_registry()
    except ConfigurationError as e:
        logger.error(f"Tool registration failed: {e}")
        return 1

    print(f"\n=== Registered Tools ({len(registry)}) ===")
    for descriptor in registry.descriptors():
        print(f"\n{descriptor.name}")
        print(f"  {descriptor.description}")
        for param in descriptor.parameters:
            required = " (required)" if param.required else ""
            print(f"    - {param.name}: {param.type}{required}  {param.description}")

    return 0


async def cmd_ask(args, settings: Settings) -> int:
    """
    Run one request through the tool-calling orchestrator.

    Prints the final answer, which tool the model chose (if any) and the
    token usage summed over both turns.
    """
    logger = get_logger(__name__)

    try:
        orchestrator = AgentComponents(settings).create_orchestrator()
    except ConfigurationError as e:
        logger.error(f"Tool registration failed: {e}")
        return 1

    logger.info(f"Sending to {settings.llm.model}...")

    try:
        response = await orchestrator.generate_response(args.prompt)
    except ValueError as e:
        print(f"Invalid request: {e}", file=sys.stderr)
        return 1
    except ModelUnavailableError as e:
        phase = f" (turn {e.phase})" if e.phase else ""
        print(f"\nLLM error{phase}: {e}", file=sys.stderr)
        print("Tip: Set LLM__API_KEY in your .env file.", file=sys.stderr)
        return 1

    print("\n=== ReportAgent ===")
    print(f"Q: {args.prompt}\n")
    print(response.text)

    if response.tool_call:
        tc = response.tool_call
        print("\n--- Tool Call ---")
        print(f"  {tc.name}({json.dumps(tc.arguments, ensure_ascii=False)}) → {tc.status}")
        if tc.error:
            print(f"  error: {tc.error}")

    print(f"\nTokens: {response.usage.total_tokens} "
          f"(prompt {response.usage.prompt_tokens} "
          f"+ completion {response.usage.completion_tokens})")

    return 0


async def cmd_report(args, settings: Settings) -> int:
    """Query the cleaning data source directly."""
    logger = get_logger(__name__)

    service = AgentComponents(settings).create_report_service()
    try:
        records = await service.get_cleaning_report(args.start, args.end)
    except Exception as e:
        logger.error(f"Report failed: {e}")
        return 1

    payload = [r.model_dump(mode="json", by_alias=True) for r in records]
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    logger.info(f"{len(records)} records")
    return 0


async def cmd_call_tool(args, settings: Settings) -> int:
    """Execute one tool by name, bypassing the model."""
    logger = get_logger(__name__)

    try:
        arguments = json.loads(args.args)
    except json.JSONDecodeError as e:
        logger.error(f"--args is not valid JSON: {e}")
        return 1
    if not isinstance(arguments, dict):
        logger.error("--args must be a JSON object")
        return 1

    try:
        tool = AgentComponents(settings).create_registry().require(args.name)
        result = await tool.execute(arguments)
    except (ConfigurationError, UnresolvedToolError, ToolExecutionError) as e:
        logger.error(str(e))
        return 1

    print(result)
    return 0


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    # Load settings
    try:
        settings = load_settings(env_file=args.env_file)
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Override log level if specified
    if args.log_level:
        settings.log_level = args.log_level

    setup_logging(settings)

    if args.command == "config":
        return cmd_config(settings)
    elif args.command == "tools":
        return cmd_tools(settings)
    elif args.command == "ask":
        return asyncio.run(cmd_ask(args, settings))
    elif args.command == "report":
        return asyncio.run(cmd_report(args, settings))
    elif args.command == "call-tool":
        return asyncio.run(cmd_call_tool(args, settings))
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
