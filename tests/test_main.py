"""Tests for the command line entrypoint."""

import httpx

from photobooth import main as cli
from photobooth.client.gallery_client import HttpxGalleryClient


def _mock_client(handler) -> HttpxGalleryClient:  # type: ignore[no-untyped-def]
    return HttpxGalleryClient(
        base_url="http://booth.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _patch_client(monkeypatch, handler) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setattr(
        cli.HttpxGalleryClient,
        "create",
        classmethod(lambda cls, url: _mock_client(handler)),
    )


def test_parser_reads_capture_options() -> None:
    args = cli.build_parser().parse_args(
        ["capture", "--no-countdown", "--facing", "environment", "--filename", "x.png"]
    )

    assert args.command == "capture"
    assert args.countdown is False
    assert args.facing == "environment"
    assert args.filename == "x.png"


def test_gallery_command_prints_photos(monkeypatch, capsys) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[
                {
                    "filename": "1-abcdef.png",
                    "url": "/uploads/1-abcdef.png",
                    "size": 8,
                    "createdAt": "2024-05-01T12:00:00Z",
                }
            ],
        )

    _patch_client(monkeypatch, handler)

    assert cli.main(["gallery"]) == 0
    assert "1-abcdef.png" in capsys.readouterr().out


def test_delete_command_with_yes(monkeypatch, capsys) -> None:
    photos = [
        {
            "filename": "old.png",
            "url": "/uploads/old.png",
            "size": 8,
            "createdAt": "2024-05-01T12:00:00Z",
        }
    ]
    deleted: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "DELETE":
            deleted.append(request.url.path)
            photos.clear()
            return httpx.Response(204)
        return httpx.Response(200, json=photos)

    _patch_client(monkeypatch, handler)

    assert cli.main(["delete", "old.png", "--yes"]) == 0
    assert deleted == ["/api/photos/old.png"]
    assert "Gallery is empty" in capsys.readouterr().out


def test_delete_command_unknown_photo(monkeypatch, capsys) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    _patch_client(monkeypatch, handler)

    assert cli.main(["delete", "ghost.png", "--yes"]) == 1
    assert "No photo named ghost.png" in capsys.readouterr().err
