"""Tests for PickerHost: tab cycling, key delegation and window-shown reset."""

import asyncio

import pytest

from clipdeck.config.schema import Config
from clipdeck.events.hub import PushEventHub
from clipdeck.events.types import WINDOW_SHOWN
from clipdeck.history.cache import HistoryCache
from clipdeck.navigation.keys import KeyPress
from clipdeck.pickers.host import PickerHost, PickerTab, build_surfaces
from clipdeck.pickers.viewmodel import GifPickerViewModel, HistoryViewModel


async def settle():
    for _ in range(3):
        await asyncio.sleep(0)


class TestBuildSurfaces:
    def test_without_gifs(self, backend):
        surfaces = build_surfaces(Config(), HistoryCache(backend), backend)

        assert set(surfaces) == {
            PickerTab.CLIPBOARD,
            PickerTab.EMOJI,
            PickerTab.KAOMOJI,
            PickerTab.SYMBOLS,
        }
        assert isinstance(surfaces[PickerTab.CLIPBOARD], HistoryViewModel)

    def test_with_gifs(self, backend, gif_search):
        surfaces = build_surfaces(Config(), HistoryCache(backend), backend, gif_search)
        assert isinstance(surfaces[PickerTab.GIFS], GifPickerViewModel)

    def test_grid_columns_from_config(self, backend):
        config = Config.model_validate({"grid": {"emoji_columns": 5, "kaomoji_columns": 2}})
        surfaces = build_surfaces(config, HistoryCache(backend), backend)

        assert surfaces[PickerTab.EMOJI].navigator.column_count == 5
        assert surfaces[PickerTab.KAOMOJI].navigator.column_count == 2

    def test_custom_kaomojis_included(self, backend):
        config = Config.model_validate({"custom_kaomojis": [{"text": "(•_•)"}]})
        surfaces = build_surfaces(config, HistoryCache(backend), backend)

        kaomoji = surfaces[PickerTab.KAOMOJI]
        assert kaomoji.source_items()[0].display == "(•_•)"


class TestPickerHost:
    def test_requires_surfaces(self):
        with pytest.raises(ValueError):
            PickerHost({})

    def test_tab_order_follows_enum(self, backend, gif_search):
        surfaces = build_surfaces(Config(), HistoryCache(backend), backend, gif_search)
        reordered = dict(reversed(list(surfaces.items())))

        host = PickerHost(reordered)

        assert host.tabs == tuple(PickerTab)
        assert host.active_tab is PickerTab.CLIPBOARD

    @pytest.mark.asyncio
    async def test_tab_cycling(self, backend):
        host = PickerHost(build_surfaces(Config(), HistoryCache(backend), backend))

        assert await host.handle_key(KeyPress("tab"))
        assert host.active_tab is PickerTab.EMOJI

        await host.handle_key(KeyPress("tab", shift=True))
        assert host.active_tab is PickerTab.CLIPBOARD

        await host.handle_key(KeyPress("s-tab"))
        assert host.active_tab is PickerTab.SYMBOLS

        await host.handle_key(KeyPress("tab"))
        assert host.active_tab is PickerTab.CLIPBOARD

    def test_switch_to_missing_tab(self, backend):
        host = PickerHost(build_surfaces(Config(), HistoryCache(backend), backend))
        with pytest.raises(KeyError):
            host.switch_to(PickerTab.GIFS)

    @pytest.mark.asyncio
    async def test_keys_delegated_to_active(self, backend):
        host = PickerHost(build_surfaces(Config(), HistoryCache(backend), backend))
        host.switch_to(PickerTab.SYMBOLS)

        await host.handle_key(KeyPress("a"))

        assert host.active.filter.query == "a"
        assert host.surface(PickerTab.CLIPBOARD).filter.query == ""

    @pytest.mark.asyncio
    async def test_window_shown_resets_active_surface(self, backend):
        hub = PushEventHub()
        cache = HistoryCache(backend)
        await cache.fetch()
        host = PickerHost(build_surfaces(Config(), cache, backend), hub=hub)

        async with host:
            assert hub.subscriber_count(WINDOW_SHOWN) == 1
            await host.handle_key(KeyPress("o"))
            await host.handle_key(KeyPress("down"))
            assert host.active.filter.is_open

            await hub.publish({"type": WINDOW_SHOWN})
            await settle()

            assert not host.active.filter.is_open
            assert host.active.navigator.focused_index == 0
            assert len(host.active.visible) == 6

        assert hub.subscriber_count(WINDOW_SHOWN) == 0

    @pytest.mark.asyncio
    async def test_start_loads_gifs(self, backend, gif_search):
        host = PickerHost(build_surfaces(Config(), HistoryCache(backend), backend, gif_search))

        async with host:
            gifs = host.surface(PickerTab.GIFS)
            assert [item.id for item in gifs.visible][0] == "trending-0"

        assert gif_search.queries == [""]
