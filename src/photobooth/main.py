"""Command line entrypoint for the photobooth."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable
from pathlib import Path

import uvicorn

from photobooth.app_logging import configure_logging
from photobooth.client.camera import Facing, OpenCvCamera
from photobooth.client.capture import CaptureController, CaptureSession, Countdown
from photobooth.client.gallery_client import GalleryClientError, HttpxGalleryClient
from photobooth.client.renderer import ConsoleGalleryView, GalleryRenderer
from photobooth.config import Settings

_logger = logging.getLogger("photobooth.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photobooth", description="Photo booth server and capture client"
    )
    parser.add_argument(
        "--server-url",
        default=None,
        help="Gallery server base URL (defaults to SERVER_URL)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the gallery server")
    serve.add_argument("--host", default=None, help="Listen address (defaults to HOST)")
    serve.add_argument(
        "--port", type=int, default=None, help="Listen port (defaults to PORT)"
    )

    capture = commands.add_parser("capture", help="Take a photo and upload it")
    capture.add_argument(
        "--no-countdown",
        dest="countdown",
        action="store_false",
        help="Shoot immediately instead of counting down",
    )
    capture.add_argument(
        "--facing",
        choices=[facing.value for facing in Facing],
        default=Facing.USER.value,
        help="Which camera to use",
    )
    capture.add_argument("--filename", default=None, help="Name to store the photo as")
    capture.set_defaults(countdown=True)

    upload = commands.add_parser("upload", help="Upload an image file")
    upload.add_argument("path", type=Path)

    commands.add_parser("gallery", help="List the gallery")

    delete = commands.add_parser("delete", help="Delete a photo from the gallery")
    delete.add_argument("filename")
    delete.add_argument("--yes", action="store_true", help="Skip the confirmation")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    settings = Settings()

    if args.command == "serve":
        host = args.host or settings.host
        port = args.port or settings.port
        _logger.info("Photobooth backend running at http://%s:%s", host, port)
        uvicorn.run("photobooth.api.asgi:app", host=host, port=port)
        return 0

    server_url = args.server_url or settings.server_url
    return asyncio.run(_run_client(args, settings, server_url))


async def _run_client(
    args: argparse.Namespace, settings: Settings, server_url: str
) -> int:
    client = HttpxGalleryClient.create(server_url)
    view = ConsoleGalleryView()
    renderer = GalleryRenderer(
        client=client,
        view=view,
        confirm=_confirm_with(args),
        notify=_print_error,
    )
    try:
        if args.command == "capture":
            return await _capture(args, settings, client, renderer)
        if args.command == "upload":
            result = await client.upload_file(args.path)
            print(f"Uploaded {result.filename}: {result.url}")
            return 0
        if args.command == "gallery":
            return 0 if await renderer.refresh() is not None else 1
        if args.command == "delete":
            return await _delete(args.filename, renderer, view)
    except GalleryClientError as exc:
        _print_error(exc.message)
        return 1
    finally:
        await client.close()
    return 2


async def _capture(
    args: argparse.Namespace,
    settings: Settings,
    client: HttpxGalleryClient,
    renderer: GalleryRenderer,
) -> int:
    camera = OpenCvCamera(
        device_indices={
            Facing.USER: settings.camera_user_index,
            Facing.ENVIRONMENT: settings.camera_environment_index,
        }
    )
    controller = CaptureController(
        camera=camera,
        gallery=client,
        session=CaptureSession(facing=Facing(args.facing)),
        countdown=Countdown(
            start_from=settings.countdown_from,
            step_seconds=settings.countdown_step_seconds,
        ),
        countdown_enabled=args.countdown,
        settle_seconds=settings.camera_settle_seconds,
        default_width=settings.snapshot_default_width,
        on_countdown=_print_countdown,
        on_error=_print_error,
        on_refresh=renderer.refresh,
    )
    try:
        result = await controller.capture(args.filename)
    finally:
        await controller.stop()
    if result is None:
        return 1
    print(f"Saved {result.filename}: {result.url}")
    return 0


async def _delete(
    filename: str, renderer: GalleryRenderer, view: ConsoleGalleryView
) -> int:
    if await renderer.refresh() is None:
        return 1
    for card in list(view.cards):
        if card.photo.filename == filename:
            return 0 if await card.delete() else 1
    _print_error(f"No photo named {filename}")
    return 1


def _confirm_with(args: argparse.Namespace) -> Callable[[str], bool]:
    if getattr(args, "yes", False):
        return lambda _prompt: True
    return lambda prompt: input(f"{prompt} [y/N] ").strip().lower() in {"y", "yes"}


def _print_countdown(value: int) -> None:
    if value:
        print(value, flush=True)


def _print_error(message: str) -> None:
    print(message, file=sys.stderr)


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
