"""
tests/core/test_provider.py - ProviderContext tests
"""

import pytest

from core.config import ProviderConfig
from core.data.inventory import (
    FileInventorySource,
    RestInventorySource,
    StaticInventorySource,
)
from core.exceptions import ConfigError, FetchError
from core.provider import ProviderContext, build_source, invalidates_inventory


class TestBuildSource:
    def test_rest_source(self):
        config = ProviderConfig(portal_url="https://portal.example", token="t0k", project_id="p-1", timeout=9)
        source = build_source(config)

        assert isinstance(source, RestInventorySource)
        assert source.url == "https://portal.example/rest/available-resources"

    def test_file_source_wins(self, inventory_file):
        config = ProviderConfig(portal_url="https://portal.example", inventory_file=str(inventory_file))

        assert isinstance(build_source(config), FileInventorySource)

    def test_no_endpoint(self):
        with pytest.raises(ConfigError):
            build_source(ProviderConfig())


class TestConfigure:
    """configuration performs the initial refresh"""

    def test_configure_populates_cache(self, provider_context):
        assert provider_context.cache.is_populated is True
        assert len(provider_context.snapshot().get("images")) == 4

    def test_configure_from_file(self, inventory_file):
        ctx = ProviderContext.configure(ProviderConfig(inventory_file=str(inventory_file)))

        assert [image.id for image in ctx.query("images", {"flavor": "gpu"})] == ["i1", "i3"]

    def test_initial_refresh_failure_aborts(self, failing_source_factory):
        source = failing_source_factory(FetchError("unreachable"))

        with pytest.raises(FetchError):
            ProviderContext.configure(ProviderConfig(rest_url="https://api.example"), source=source)

        assert source.calls == 1

    def test_missing_inventory_file_aborts(self, tmp_path):
        config = ProviderConfig(inventory_file=str(tmp_path / "missing.json"))

        with pytest.raises(FetchError) as exc_info:
            ProviderContext.configure(config)

        assert exc_info.value.reason == FetchError.IO

    def test_repr(self, provider_context):
        assert "p-test" in repr(provider_context)


class TestMutationRefresh:
    """mutations refresh the inventory once they succeed"""

    def test_refresh_after_mutation(self):
        source = StaticInventorySource({"sshKeys": []})
        ctx = ProviderContext.configure(ProviderConfig(inventory_file="unused.json"), source=source)

        source.set_payload({"sshKeys": [{"id": "k1", "name": "ops"}]})
        ctx.refresh_after_mutation("create ssh_key")

        assert [key.id for key in ctx.query("ssh_keys")] == ["k1"]

    def test_failed_refresh_is_reported_and_stale(self, provider_context, failing_source_factory):
        before = provider_context.snapshot()
        provider_context.cache._source = failing_source_factory(FetchError("down"))

        with pytest.raises(FetchError) as exc_info:
            provider_context.refresh_after_mutation("delete ssh_key")

        assert exc_info.value.details["operation"] == "delete ssh_key"
        assert provider_context.cache.is_stale is True
        assert provider_context.snapshot() is before

    def test_decorator_refreshes(self):
        source = StaticInventorySource({"sshKeys": []})
        ctx = ProviderContext.configure(ProviderConfig(inventory_file="unused.json"), source=source)

        @invalidates_inventory("create ssh_key")
        def create_ssh_key(ctx, name):
            source.set_payload({"sshKeys": [{"id": "k-new", "name": name}]})
            return "k-new"

        assert create_ssh_key(ctx, "deploy") == "k-new"
        assert create_ssh_key.__name__ == "create_ssh_key"
        assert [key.name for key in ctx.query("ssh_keys")] == ["deploy"]
        assert source.fetch_count == 2

    def test_decorator_skips_refresh_when_mutation_fails(self):
        source = StaticInventorySource({})
        ctx = ProviderContext.configure(ProviderConfig(inventory_file="unused.json"), source=source)

        @invalidates_inventory("create ssh_key")
        def create_ssh_key(ctx, name):
            raise RuntimeError("rejected")

        with pytest.raises(RuntimeError):
            create_ssh_key(ctx, "deploy")

        assert source.fetch_count == 1
