"""
ModelRelay CLI entry point.

Local front end over the request pipeline: list model catalogs, check
credentials, and prepare or run a chat request described in JSON.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import openai

from modelrelay import __version__
from modelrelay.config.settings import RelayConfig, load_config
from modelrelay.core.ai.base import CatalogEntry, MissingCredentialError
from modelrelay.core.ai.registry import ProviderRegistry, create_default_registry
from modelrelay.core.orchestrator import ChatRequest, RequestOrchestrator
from modelrelay.utils.file_ops import load_workspace_snapshot, read_json

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_MISSING_CREDENTIAL = 2


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _error(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)


def _build_registry(config: RelayConfig) -> ProviderRegistry:
    return create_default_registry(
        default_provider=config.default_provider,
        fetch_timeout=config.catalog_fetch_timeout,
    )


def _read_request(source: str) -> Dict[str, Any]:
    if source == "-":
        data = json.load(sys.stdin)
    else:
        data = read_json(source)
        if data is None:
            raise ValueError(f"Request file not found: {source}")
    if not isinstance(data, dict):
        raise ValueError("Request JSON must be an object")
    return data


def _load_request(args: argparse.Namespace, config: RelayConfig) -> ChatRequest:
    request = ChatRequest.from_dict(_read_request(args.request))
    if args.workspace:
        request.files = load_workspace_snapshot(args.workspace, work_dir=config.work_dir)
    if args.prompt:
        request.prompt_id = args.prompt
    return request


# =====================================================================
#  COMMANDS
# =====================================================================

def cmd_models(args: argparse.Namespace, config: RelayConfig) -> int:
    """List catalog entries, optionally refreshing dynamic catalogs."""
    registry = _build_registry(config)
    if args.dynamic:
        catalog: List[CatalogEntry] = asyncio.run(registry.refresh_catalog())
    else:
        catalog = registry.aggregated_catalog()

    if args.provider:
        catalog = [entry for entry in catalog if entry.provider == args.provider]

    for entry in catalog:
        print(f"{entry.provider}\t{entry.name}\t{entry.max_token_allowed}\t{entry.label}")
    return EXIT_OK


def cmd_check_key(args: argparse.Namespace, config: RelayConfig) -> int:
    """Report whether the environment supplies a secret for a provider."""
    registry = _build_registry(config)
    provider = registry.get(args.provider)
    print(json.dumps({
        "provider": args.provider,
        "isSet": registry.check_credential(args.provider),
        "apiKeyLink": provider.get_api_key_link if provider else None,
    }))
    return EXIT_OK


def cmd_prepare(args: argparse.Namespace, config: RelayConfig) -> int:
    """Resolve invocation parameters and print them without secrets."""
    orchestrator = RequestOrchestrator(_build_registry(config), config=config)
    params = orchestrator.run_request(_load_request(args, config))
    summary = params.describe()
    if args.show_prompt:
        summary["system_prompt"] = params.system_prompt
    print(json.dumps(summary, indent=2))
    return EXIT_OK


async def _generate(orchestrator: RequestOrchestrator, request: ChatRequest, options: Dict[str, Any]) -> None:
    async for chunk in orchestrator.stream_text(request, **options):
        sys.stdout.write(chunk)
        sys.stdout.flush()
    sys.stdout.write("\n")


def cmd_generate(args: argparse.Namespace, config: RelayConfig) -> int:
    """Run the pipeline and stream the generated text to stdout."""
    orchestrator = RequestOrchestrator(_build_registry(config), config=config)
    request = _load_request(args, config)
    options: Dict[str, Any] = {}
    if args.temperature is not None:
        options["temperature"] = args.temperature
    asyncio.run(_generate(orchestrator, request, options))
    return EXIT_OK


# =====================================================================
#  CLI ENTRY WITH SUBCOMMANDS
# =====================================================================

def _add_request_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "request",
        help="Path to the request JSON, or - for stdin"
    )
    parser.add_argument(
        "--workspace",
        type=str,
        help="Directory to load as the workspace snapshot"
    )
    parser.add_argument(
        "--prompt",
        type=str,
        help="Prompt template id (default: default)"
    )


def _create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="modelrelay",
        description="ModelRelay: provider negotiation and request assembly for chat models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  modelrelay models                         # List static catalogs
  modelrelay models --dynamic --provider Ollama
  modelrelay check-key OpenAI
  modelrelay prepare request.json --workspace .
  modelrelay generate request.json
        """
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"modelrelay {__version__}"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to the config file (default: ~/.modelrelay/config.json)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands"
    )

    # models
    parser_models = subparsers.add_parser(
        "models",
        help="List known models"
    )
    parser_models.add_argument(
        "--dynamic",
        action="store_true",
        help="Also fetch live catalogs from providers that offer them"
    )
    parser_models.add_argument(
        "--provider",
        type=str,
        help="Only show models of this provider"
    )

    # check-key
    parser_check = subparsers.add_parser(
        "check-key",
        help="Check whether a provider's API key is set in the environment"
    )
    parser_check.add_argument("provider", help="Provider name")

    # prepare
    parser_prepare = subparsers.add_parser(
        "prepare",
        help="Resolve a request and print the invocation parameters"
    )
    _add_request_arguments(parser_prepare)
    parser_prepare.add_argument(
        "--show-prompt",
        action="store_true",
        help="Include the full system prompt in the output"
    )

    # generate
    parser_generate = subparsers.add_parser(
        "generate",
        help="Resolve a request and stream the model's answer"
    )
    _add_request_arguments(parser_generate)
    parser_generate.add_argument(
        "--temperature",
        type=float,
        help="Sampling temperature passed to the provider"
    )

    return parser


COMMANDS = {
    "models": cmd_models,
    "check-key": cmd_check_key,
    "prepare": cmd_prepare,
    "generate": cmd_generate,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with subcommand routing."""
    parser = _create_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_ERROR

    try:
        config = load_config(args.config)
        return handler(args, config)
    except MissingCredentialError as e:
        _error(str(e))
        return EXIT_MISSING_CREDENTIAL
    except openai.OpenAIError as e:
        _error(f"Generation failed: {e}")
        return EXIT_ERROR
    except (ValueError, KeyError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        _error(str(e))
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main() or 0)
