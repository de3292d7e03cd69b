import logging
import textwrap

import pytest
from fastapi import APIRouter

from kickoffhub.bootstrap.module_loader import ModuleManifest, load_modules, normalize_manifest
from kickoffhub.core.container import Container
from kickoffhub.core.tokens import Tokens


def _write_module(root, name, source):
    pkg = root / name
    pkg.mkdir()
    (pkg / "__init__.py").write_text(textwrap.dedent(source), encoding="utf-8")
    return pkg


# -------------------- normalize_manifest -------------------- #


def test_normalize_none_uses_fallback_name_and_defaults():
    m = normalize_manifest(None, "empty")
    assert m == ModuleManifest(name="empty")
    assert m.base_path == "/"
    assert m.public_api == {}
    assert m.tasks == ()


def test_normalize_dict_ignores_unknown_keys_and_wraps_single_task():
    def task():
        return None

    router = APIRouter()
    m = normalize_manifest(
        {"routes": router, "tasks": task, "extra": True, "base_path": None}, "alpha"
    )
    assert m.name == "alpha"
    assert m.routes is router
    assert m.base_path == "/"
    assert m.tasks == (task,)


def test_normalize_dataclass_keeps_values():
    raw = ModuleManifest(name="custom", base_path="/v2", public_api={"svc": 1})
    m = normalize_manifest(raw, "fallback")
    assert m.name == "custom"
    assert m.base_path == "/v2"
    assert m.public_api == {"svc": 1}


def test_normalize_rejects_other_types():
    with pytest.raises(TypeError):
        normalize_manifest(["not", "a", "manifest"], "bad")


# -------------------- load_modules -------------------- #


@pytest.mark.asyncio
async def test_loads_module_with_register_and_skips_dir_without_entry(tmp_path):
    _write_module(
        tmp_path,
        "alpha",
        """
        from fastapi import APIRouter

        router = APIRouter()

        def register(context):
            return {"name": "alpha", "routes": router}
        """,
    )
    (tmp_path / "beta").mkdir()
    (tmp_path / "notes.txt").write_text("not a module")

    manifests = await load_modules(Container(), tmp_path)

    assert [m.name for m in manifests] == ["alpha"]
    alpha = manifests[0]
    assert alpha.base_path == "/"
    assert isinstance(alpha.routes, APIRouter)
    assert alpha.public_api == {}
    assert alpha.tasks == ()


@pytest.mark.asyncio
async def test_failing_module_is_logged_and_others_still_load(tmp_path, caplog):
    _write_module(tmp_path, "broken", 'raise RuntimeError("boom")\n')
    _write_module(
        tmp_path,
        "ok",
        """
        def register(context):
            return {"name": "ok"}
        """,
    )

    with caplog.at_level(logging.ERROR):
        manifests = await load_modules(Container(), tmp_path)

    assert [m.name for m in manifests] == ["ok"]
    messages = [r.getMessage() for r in caplog.records]
    assert any("broken" in msg and "boom" in msg for msg in messages)


@pytest.mark.asyncio
async def test_register_errors_are_isolated(tmp_path, caplog):
    _write_module(
        tmp_path,
        "a_fails",
        """
        def register(context):
            raise ValueError("no config")
        """,
    )
    _write_module(tmp_path, "b_returns_none", "def register(context):\n    return None\n")

    with caplog.at_level(logging.ERROR):
        manifests = await load_modules(Container(), tmp_path)

    assert [m.name for m in manifests] == ["b_returns_none"]
    assert any("a_fails" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_async_register_and_default_export(tmp_path):
    _write_module(
        tmp_path,
        "async_mod",
        """
        async def register(context):
            context.container.set("async_mod.ready", True)
            return {"public_api": {"answer": 42}}
        """,
    )
    _write_module(
        tmp_path,
        "default_mod",
        """
        def default(context):
            return {"name": "renamed"}
        """,
    )
    container = Container()

    manifests = await load_modules(container, tmp_path)

    assert [m.name for m in manifests] == ["async_mod", "renamed"]
    assert manifests[0].public_api == {"answer": 42}
    assert container.get("async_mod.ready") is True


@pytest.mark.asyncio
async def test_default_export_wins_over_register(tmp_path):
    _write_module(
        tmp_path,
        "both",
        """
        def default(context):
            return {"name": "from_default"}

        def register(context):
            return {"name": "from_register"}
        """,
    )

    manifests = await load_modules(Container(), tmp_path)

    assert [m.name for m in manifests] == ["from_default"]


@pytest.mark.asyncio
async def test_module_without_register_is_skipped(tmp_path):
    _write_module(tmp_path, "plain", "VALUE = 1\n")
    assert await load_modules(Container(), tmp_path) == []


@pytest.mark.asyncio
async def test_modules_share_the_container_in_name_order(tmp_path):
    _write_module(
        tmp_path,
        "a_provider",
        """
        def register(context):
            context.container.set("services.greeting", "hello")
        """,
    )
    _write_module(
        tmp_path,
        "b_consumer",
        """
        def register(context):
            greeting = context.container.get("services.greeting")
            return {"public_api": {"greeting": greeting}}
        """,
    )

    manifests = await load_modules(Container(), tmp_path)

    assert manifests[1].public_api == {"greeting": "hello"}


@pytest.mark.asyncio
async def test_module_can_import_its_own_submodules(tmp_path):
    pkg = _write_module(
        tmp_path,
        "withsub",
        """
        from .helpers import NAME

        def register(context):
            return {"name": NAME}
        """,
    )
    (pkg / "helpers.py").write_text('NAME = "from-helper"\n')

    manifests = await load_modules(Container(), tmp_path)

    assert [m.name for m in manifests] == ["from-helper"]


@pytest.mark.asyncio
async def test_missing_directory_returns_empty(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        assert await load_modules(Container(), tmp_path / "nope") == []
    assert any("does not exist" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_uses_container_logger(tmp_path, caplog):
    _write_module(tmp_path, "alpha", "def register(context):\n    return None\n")
    container = Container()
    container.set(Tokens.LOGGER, logging.getLogger("kickoffhub.test-loader"))

    with caplog.at_level(logging.INFO, logger="kickoffhub.test-loader"):
        await load_modules(container, tmp_path)

    assert any(
        r.name == "kickoffhub.test-loader" and "Loaded module 'alpha'" in r.getMessage()
        for r in caplog.records
    )
