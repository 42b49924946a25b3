"""Unit tests for MemoryCacheProvider, configuration loading and errors."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.config.loader import DEFAULT_ENGINE_CONFIG, _deep_merge, load_config
from src.config.settings import Settings
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.utils.errors import ConfigurationError, RateLimitError, TasteGraphError


# ======================================================================
# MemoryCacheProvider
# ======================================================================


class TestMemoryCacheProvider:
    @pytest.fixture()
    def cache(self) -> MemoryCacheProvider:
        return MemoryCacheProvider(max_size=100, ttl=3600)

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, cache: MemoryCacheProvider) -> None:
        assert await cache.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, cache: MemoryCacheProvider) -> None:
        await cache.set("artist:a", {"name": "Jeff Mills"})
        assert await cache.get("artist:a") == {"name": "Jeff Mills"}

    @pytest.mark.asyncio
    async def test_delete_and_exists(self, cache: MemoryCacheProvider) -> None:
        await cache.set("k", "v")
        assert await cache.exists("k") is True
        await cache.delete("k")
        assert await cache.exists("k") is False
        await cache.delete("k")  # should not raise

    @pytest.mark.asyncio
    async def test_clear(self, cache: MemoryCacheProvider) -> None:
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.clear()
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_max_size_evicts(self) -> None:
        cache = MemoryCacheProvider(max_size=2, ttl=3600)
        for key in ("a", "b", "c"):
            await cache.set(key, key)
        assert len(cache) == 2


# ======================================================================
# Configuration
# ======================================================================


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "absent.yaml"), settings=Settings())

        assert config["graph"] == DEFAULT_ENGINE_CONFIG["graph"]
        assert config["ranking"]["damping"] == 0.85
        assert config["recommendations"]["top_n"] == 5

    def test_yaml_overrides_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("graph:\n  max_hops: 2\nranking:\n  damping: 0.9\n", encoding="utf-8")

        config = load_config(str(path), settings=Settings())

        assert config["graph"]["max_hops"] == 2
        assert config["graph"]["max_related"] == 10
        assert config["ranking"]["damping"] == 0.9

    def test_defaults_not_mutated(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("graph:\n  max_hops: 4\n", encoding="utf-8")

        load_config(str(path), settings=Settings())

        assert DEFAULT_ENGINE_CONFIG["graph"]["max_hops"] == 1

    def test_settings_overrides(self, tmp_path: Path) -> None:
        settings = Settings(
            spotify_client_id="id",
            spotify_client_secret="secret",
            artist_db_path="/tmp/x.db",
            app_env="production",
        )

        config = load_config(str(tmp_path / "absent.yaml"), settings=settings)

        assert config["spotify"]["configured"] is True
        assert config["storage"]["artist_db_path"] == "/tmp/x.db"
        assert config["app"]["env"] == "production"

    def test_shipped_config_file_loads(self, project_root: Path) -> None:
        config = load_config(str(project_root / "config" / "config.yaml"), settings=Settings())
        assert config["graph"]["max_hops"] == 1
        assert config["recommendations"]["timeout"] == 60.0

    def test_malformed_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("graph: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(str(path), settings=Settings())

    def test_non_mapping_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(str(path), settings=Settings())

    def test_deep_merge(self) -> None:
        base = {"a": {"x": 1, "y": 2}, "b": 1}
        _deep_merge(base, {"a": {"y": 3}, "c": 4})
        assert base == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}


class TestErrors:
    def test_str_includes_provider(self) -> None:
        err = RateLimitError(message="slow down", provider_name="spotify", retry_after=2.0)
        assert str(err) == "[spotify] slow down"
        assert isinstance(err, TasteGraphError)
        assert err.retry_after == 2.0

    def test_str_without_provider(self) -> None:
        assert str(TasteGraphError("plain")) == "plain"
