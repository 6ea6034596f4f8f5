"""Tests for tiles.loader module."""

from __future__ import annotations

import logging

import pytest

from domain.errors import CacheInitializationError, InvalidArgumentError
from geo.projection import zoom_to_resolution
from infrastructure.http.client import AiohttpTransport, HttpResponse
from tiles.cache import TileDiskCache
from tiles.loader import TileLoader

TEMPLATE = 'http://tiles.test/{z}/{x}/{y}.png'


class StubTransport:
    """Records requested URLs; URLs listed in `failing` get HTTP 404."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = set(failing or ())
        self.urls: list[str] = []
        self.closed = False

    def get(self, url: str) -> HttpResponse:
        self.urls.append(url)
        if url in self.failing:
            return HttpResponse(url=url, status=404)
        return HttpResponse(url=url, status=200, body=f'image:{url}'.encode())

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def transport():
    return StubTransport()


def make_loader(tmp_path, transport, **overrides):
    params = {
        'latitude': 0.0,
        'longitude': 0.0,
        'zoom': 1,
        'blocks': 1,
    }
    params.update(overrides)
    return TileLoader(TEMPLATE, cache_root=tmp_path, transport=transport, **params)


class TestConstruction:
    """Tests for TileLoader construction and session queries."""

    def test_centre_and_offsets(self, tmp_path, transport):
        loader = make_loader(tmp_path, transport, zoom=0)
        assert (loader.center_tile_x, loader.center_tile_y) == (0, 0)
        assert loader.origin_offset_x == pytest.approx(0.5)
        assert loader.origin_offset_y == pytest.approx(0.5)

    def test_object_uri(self, tmp_path, transport):
        assert make_loader(tmp_path, transport).object_uri == TEMPLATE

    def test_creates_cache_namespace(self, tmp_path, transport):
        loader = make_loader(tmp_path, transport)
        assert loader.cache.cache_dir.is_dir()
        assert loader.cache.cache_dir.parent == tmp_path

    @pytest.mark.parametrize(
        'overrides',
        [{'latitude': 86.0}, {'longitude': -181.0}, {'zoom': 32}, {'blocks': -1}],
    )
    def test_invalid_arguments(self, tmp_path, transport, overrides):
        with pytest.raises(InvalidArgumentError):
            make_loader(tmp_path, transport, **overrides)

    def test_cache_failure_is_fatal(self, tmp_path, transport):
        blocker = tmp_path / 'blocker'
        blocker.write_bytes(b'')
        with pytest.raises(CacheInitializationError):
            make_loader(blocker, transport)

    def test_resolution(self, tmp_path, transport):
        loader = make_loader(tmp_path, transport, latitude=45.0, longitude=7.0, zoom=15)
        assert loader.resolution() == pytest.approx(zoom_to_resolution(45.0, 15))

    def test_no_tiles_before_start(self, tmp_path, transport):
        assert make_loader(tmp_path, transport).tiles == ()
        assert transport.urls == []


class TestInsideCentreTile:
    """Tests for inside_centre_tile."""

    def test_true_for_origin(self, tmp_path, transport):
        loader = make_loader(tmp_path, transport, latitude=47.0, longitude=8.0, zoom=10)
        assert loader.inside_centre_tile(47.0, 8.0)

    def test_false_one_tile_east(self, tmp_path, transport):
        loader = make_loader(tmp_path, transport, latitude=47.0, longitude=8.0, zoom=10)
        tile_width_deg = 360.0 / 2**10
        assert not loader.inside_centre_tile(47.0, 8.0 + tile_width_deg)

    def test_invalid_point_raises(self, tmp_path, transport):
        loader = make_loader(tmp_path, transport)
        with pytest.raises(InvalidArgumentError):
            loader.inside_centre_tile(89.0, 0.0)


class TestStart:
    """Tests for TileLoader.start."""

    def test_clamped_window_loads_whole_grid(self, tmp_path, transport):
        loader = make_loader(tmp_path, transport, latitude=80.0, longitude=-170.0, zoom=2, blocks=5)
        assert (loader.center_tile_x, loader.center_tile_y) == (0, 0)

        tiles = loader.start()

        assert len(tiles) == 16
        assert [(t.x, t.y) for t in tiles] == [(x, y) for y in range(4) for x in range(4)]
        assert all(t.z == 2 for t in tiles)
        assert len(transport.urls) == 16
        assert transport.urls[0] == 'http://tiles.test/2/0/0.png'
        assert transport.urls[1] == 'http://tiles.test/2/1/0.png'

    def test_downloaded_bytes_are_cached(self, tmp_path, transport):
        loader = make_loader(tmp_path, transport, zoom=0, blocks=0)
        (tile,) = loader.start()
        assert tile.image_path == loader.cache.path_for_tile(0, 0, 0)
        assert tile.image_path.read_bytes() == b'image:http://tiles.test/0/0/0.png'

    def test_cached_tiles_are_not_fetched(self, tmp_path, transport):
        cache = TileDiskCache(tmp_path, TEMPLATE)
        cache.write(0, 0, 1, b'seed')
        cache.write(1, 1, 1, b'seed')
        loader = make_loader(tmp_path, transport)

        tiles = loader.start()

        assert len(tiles) == 4
        assert sorted(transport.urls) == [
            'http://tiles.test/1/0/1.png',
            'http://tiles.test/1/1/0.png',
        ]
        assert cache.path_for_tile(0, 0, 1).read_bytes() == b'seed'
        assert loader.last_report.cache_hits == 2
        assert loader.last_report.downloaded == 2

    def test_fully_cached_window_makes_no_requests(self, tmp_path, transport):
        make_loader(tmp_path, transport).start()
        second = StubTransport()
        tiles = make_loader(tmp_path, second).start()
        assert len(tiles) == 4
        assert second.urls == []

    def test_partial_failure_then_retry(self, tmp_path, caplog):
        failing_url = 'http://tiles.test/1/1/0.png'
        transport = StubTransport(failing={failing_url})
        loader = make_loader(tmp_path, transport)

        with caplog.at_level(logging.WARNING, logger='tiles.loader'):
            first = loader.start()

        assert len(first) == 3
        assert (1, 0) not in {(t.x, t.y) for t in first}
        assert len(transport.urls) == 4
        assert loader.last_report.failed == 1
        assert loader.last_report.failed_tiles == [(1, 0)]
        assert f'Failed loading {failing_url} with code 404' in caplog.text

        transport.failing.clear()
        second = loader.start()

        assert len(second) == 4
        assert len(transport.urls) == 5
        assert transport.urls[-1] == failing_url
        assert loader.last_report.cache_hits == 3
        assert loader.last_report.downloaded == 1

    def test_all_tiles_failing(self, tmp_path):
        transport = StubTransport(
            failing={f'http://tiles.test/1/{x}/{y}.png' for x in range(2) for y in range(2)}
        )
        loader = make_loader(tmp_path, transport)
        assert loader.start() == ()
        assert loader.last_report.failed == 4

    def test_results_are_snapshots(self, tmp_path, transport):
        loader = make_loader(tmp_path, transport)
        first = loader.start()
        loader.abort()
        second = loader.start()
        assert len(first) == 4
        assert first == second
        assert first is not second

    def test_abort_clears_tiles(self, tmp_path, transport):
        loader = make_loader(tmp_path, transport)
        loader.start()
        loader.abort()
        assert loader.tiles == ()
        loader.abort()
        assert loader.tiles == ()

    def test_start_replaces_previous_set(self, tmp_path, transport):
        loader = make_loader(tmp_path, transport)
        loader.start()
        loader.start()
        assert len(loader.tiles) == 4

    def test_progress_callback(self, tmp_path, transport):
        calls = []
        make_loader(tmp_path, transport).start(on_progress=lambda d, t: calls.append((d, t)))
        assert calls == [(1, 4), (2, 4), (3, 4), (4, 4)]

    def test_write_failure_skips_tile(self, tmp_path, transport, monkeypatch):
        loader = make_loader(tmp_path, transport, zoom=0, blocks=0)

        def broken_write(*_args, **_kwargs):
            raise OSError('disk full')

        monkeypatch.setattr(loader.cache, 'write', broken_write)
        assert loader.start() == ()
        assert loader.last_report.failed == 1


class TestClose:
    """Tests for transport ownership."""

    def test_injected_transport_left_open(self, tmp_path, transport):
        with make_loader(tmp_path, transport):
            pass
        assert not transport.closed

    def test_default_transport_closed(self, tmp_path):
        loader = TileLoader(TEMPLATE, 0.0, 0.0, 1, 1, cache_root=tmp_path)
        assert isinstance(loader.fetcher.transport, AiohttpTransport)
        loader.close()
        with pytest.raises(RuntimeError):
            loader.fetcher.transport.get('http://tiles.test/0/0/0.png')
