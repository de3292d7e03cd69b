import pytest

from kickoffhub.core.container import Container, MissingDependencyError, register_if_missing


def test_set_get_has():
    c = Container()
    assert c.has("db") is False
    assert c.set("db", 1) == 1
    assert c.has("db") is True
    assert "db" in c
    assert c.get("db") == 1


def test_set_overwrites():
    c = Container()
    c.set("x", "old")
    c.set("x", "new")
    assert c.get("x") == "new"


def test_get_missing_raises_with_key_in_message():
    c = Container()
    with pytest.raises(MissingDependencyError) as exc:
        c.get("services.teams")
    assert "services.teams" in str(exc.value)


def test_empty_key_rejected():
    with pytest.raises(ValueError):
        Container().set("", object())


def test_resolve_creates_once():
    c = Container()
    calls = []

    def factory(container):
        calls.append(container)
        return object()

    first = c.resolve("svc", factory)
    second = c.resolve("svc", factory)
    assert first is second
    assert calls == [c]


def test_resolve_without_factory_raises():
    with pytest.raises(MissingDependencyError):
        Container().resolve("missing")


def test_register_if_missing_keeps_existing_and_invokes_factories():
    c = Container()
    c.set("settings", "preset")
    assert register_if_missing(c, "settings", "other") == "preset"

    assert register_if_missing(c, "list", lambda: [1, 2]) == [1, 2]

    class Marker:
        pass

    # Klassen werden nicht instanziiert
    assert register_if_missing(c, "cls", Marker) is Marker
