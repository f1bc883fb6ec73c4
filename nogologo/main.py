"""NoGoLogo entry point

Wires one process-wide instance of each store, the request log, the image
providers and the use cases, and exposes them through a small command line.

Usage:
    nogologo keys set openai sk-...
    nogologo generate "a cat wearing a crown" -n 2 -p openai -p xai
    nogologo refine "a cat"
    nogologo config set openai model=dall-e-3 size=1024x1024
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import httpx

from .application.usecase.generate_images import GenerateImagesUseCase
from .application.usecase.refine_prompt import RefinePromptUseCase
from .application.usecase.save_images import SaveImagesUseCase
from .domain.entity.image import MAX_IMAGE_COUNT, GenerationRequest, GenerationResult, ProviderId
from .domain.exceptions import ImageGenerationError
from .domain.repository.config_store import ConfigStore
from .domain.repository.credential_store import CredentialStore
from .domain.repository.image_provider import ImageProvider
from .domain.service.image_router import ImageRouter
from .domain.service.request_log import RequestLog
from .infrastructure.config.settings import Settings, load_settings
from .infrastructure.image import GeminiImageProvider, OpenAIImageProvider, XAIImageProvider
from .infrastructure.storage.directory_photo_sink import DirectoryPhotoSink
from .infrastructure.storage.yaml_config_store import YamlConfigStore
from .infrastructure.storage.yaml_credential_store import YamlCredentialStore

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO", log_format: str = "text") -> None:
    """Configure logging

    Args:
        level: Log level
        log_format: Log format (json/text)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format == "json":
        logging.basicConfig(
            level=log_level,
            format='{"time":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","message":"%(message)s"}',
            datefmt="%Y-%m-%d %H:%M:%S",
            stream=sys.stderr,
        )
    else:
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            stream=sys.stderr,
        )


@dataclass
class Application:
    """Process-wide collaborators, built once at startup"""

    settings: Settings
    request_log: RequestLog
    credential_store: CredentialStore
    config_store: ConfigStore
    generate_images: GenerateImagesUseCase
    refine_prompt: RefinePromptUseCase
    save_images: SaveImagesUseCase


def create_image_providers(
    settings: Settings,
    request_log: RequestLog,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[ProviderId, ImageProvider]:
    """Create one image provider per provider id"""
    options = dict(
        request_log=request_log,
        timeout=settings.http.timeout,
        transport=transport,
        best_effort_decode=settings.generation.best_effort_decode,
    )
    providers: Dict[ProviderId, ImageProvider] = {
        ProviderId.XAI: XAIImageProvider(**options),
        ProviderId.OPENAI: OpenAIImageProvider(**options),
        ProviderId.GEMINI: GeminiImageProvider(**options),
    }
    logger.info(f"Initialized {len(providers)} image provider(s)")
    return providers


def create_application(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Application:
    """Build the collaborator graph"""
    request_log = RequestLog()
    credential_store = YamlCredentialStore(settings.storage.credentials_path)
    config_store = YamlConfigStore(settings.storage.providers_path)
    photo_sink = DirectoryPhotoSink(settings.storage.photo_library)

    image_router = ImageRouter(create_image_providers(settings, request_log, transport))

    return Application(
        settings=settings,
        request_log=request_log,
        credential_store=credential_store,
        config_store=config_store,
        generate_images=GenerateImagesUseCase(
            image_router=image_router,
            credential_store=credential_store,
            config_store=config_store,
            request_log=request_log,
        ),
        refine_prompt=RefinePromptUseCase(
            request_log=request_log,
            credential_store=credential_store,
            config_store=config_store,
            timeout=settings.http.timeout,
            transport=transport,
        ),
        save_images=SaveImagesUseCase(
            photo_sink=photo_sink,
            request_log=request_log,
            album_name=settings.storage.album,
        ),
    )


async def run_generate(app: Application, args: argparse.Namespace) -> int:
    prompt = args.prompt
    if args.refine:
        prompt = await app.refine_prompt.execute(prompt)
        print(f"Prompt: {prompt}")

    providers = args.provider or list(ProviderId)
    request = GenerationRequest(
        prompt=prompt,
        image_count=args.count or app.settings.generation.default_count,
        providers=frozenset(providers),
    )

    generation_round = app.generate_images.dispatch(request)
    if not generation_round.dispatched:
        print("No selected provider has an API key. Use 'nogologo keys set'.", file=sys.stderr)
        return 1

    failures = 0
    async for result in generation_round:
        print(result.message)
        if not result.succeeded:
            failures += 1
        elif not args.no_save and not await _save(app, result):
            failures += 1

    if args.log_file:
        app.request_log.export(args.log_file)

    return 1 if failures == len(generation_round.dispatched) else 0


async def _save(app: Application, result: GenerationResult) -> bool:
    try:
        location = await app.save_images.execute(result)
    except ImageGenerationError as e:
        print(f"{result.provider_id.display_name} Error: {e}", file=sys.stderr)
        return False
    print(f"  saved to {location}")
    return True


async def run_refine(app: Application, args: argparse.Namespace) -> int:
    print(await app.refine_prompt.execute(args.prompt))
    if args.log_file:
        app.request_log.export(args.log_file)
    return 0


def run_keys(app: Application, args: argparse.Namespace) -> int:
    store = app.credential_store
    if args.keys_command == "set":
        store.set(args.provider, args.key)
        print(f"Stored API key for {args.provider.display_name}")
    elif args.keys_command == "clear":
        store.delete_all()
        print("Deleted all API keys")
    else:
        for provider_id, configured in store.configured_providers().items():
            state = "configured" if configured else "missing"
            print(f"{provider_id.value}: {state}")
    return 0


def run_config(app: Application, args: argparse.Namespace) -> int:
    store = app.config_store
    providers = [args.provider] if args.provider else list(ProviderId)

    if args.config_command == "reset":
        for provider_id in providers:
            store.reset(provider_id)
            print(f"Reset {provider_id.display_name} settings to defaults")
        return 0

    if args.config_command == "set":
        config = store.load(args.provider)
        changes = dict(_parse_assignment(item) for item in args.values)
        unknown = set(changes) - set(config.to_dict())
        if unknown:
            raise ValueError(f"Unknown {args.provider.value} setting(s): {', '.join(sorted(unknown))}")
        updated = type(config).from_dict({**config.to_dict(), **changes})
        store.save(updated)
        providers = [args.provider]

    for provider_id in providers:
        print(f"[{provider_id.value}]")
        for key, value in store.load(provider_id).to_dict().items():
            print(f"  {key} = {value}")
    return 0


def _parse_assignment(item: str):
    key, sep, value = item.partition("=")
    if not sep or not key:
        raise ValueError(f"Expected key=value, got '{item}'")
    return key.strip(), value.strip()


def _image_count(value: str) -> int:
    count = int(value)
    if not (1 <= count <= MAX_IMAGE_COUNT):
        raise argparse.ArgumentTypeError(f"count must be between 1 and {MAX_IMAGE_COUNT}")
    return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nogologo",
        description="Generate images with xAI, OpenAI and Gemini",
    )
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate and save images")
    generate.add_argument("prompt", help="Image prompt")
    generate.add_argument("-n", "--count", type=_image_count, help="Images per provider (1-10)")
    generate.add_argument(
        "-p", "--provider",
        type=ProviderId.parse,
        action="append",
        help="Provider to use (repeatable, default: all with a key)",
    )
    generate.add_argument("--refine", action="store_true", help="Refine the prompt first")
    generate.add_argument("--no-save", action="store_true", help="Do not write to the photo library")
    generate.add_argument("--log-file", type=Path, help="Export the request log to a file")

    refine = subparsers.add_parser("refine", help="Refine a prompt")
    refine.add_argument("prompt", help="Prompt to refine")
    refine.add_argument("--log-file", type=Path, help="Export the request log to a file")

    keys = subparsers.add_parser("keys", help="Manage API keys")
    keys_sub = keys.add_subparsers(dest="keys_command", required=True)
    keys_set = keys_sub.add_parser("set", help="Store an API key")
    keys_set.add_argument("provider", type=ProviderId.parse)
    keys_set.add_argument("key")
    keys_sub.add_parser("clear", help="Delete all API keys")
    keys_sub.add_parser("list", help="Show which providers have a key")

    config = subparsers.add_parser("config", help="Show or change provider settings")
    config_sub = config.add_subparsers(dest="config_command", required=True)
    config_show = config_sub.add_parser("show", help="Print provider settings")
    config_show.add_argument("provider", type=ProviderId.parse, nargs="?")
    config_reset = config_sub.add_parser("reset", help="Restore default settings")
    config_reset.add_argument("provider", type=ProviderId.parse, nargs="?")
    config_set = config_sub.add_parser("set", help="Change provider settings")
    config_set.add_argument("provider", type=ProviderId.parse)
    config_set.add_argument("values", nargs="+", metavar="KEY=VALUE")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function"""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except Exception as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"Failed to load configuration: {e}")
        return 1

    setup_logging(settings.logging.level, settings.logging.format)
    app = create_application(settings)

    try:
        if args.command == "generate":
            return asyncio.run(run_generate(app, args))
        if args.command == "refine":
            return asyncio.run(run_refine(app, args))
        if args.command == "keys":
            return run_keys(app, args)
        return run_config(app, args)
    except (ImageGenerationError, ValueError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
