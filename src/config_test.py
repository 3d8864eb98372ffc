from __future__ import annotations

import random

import pytest

from uberdeploy.config import ConfigStore, Deferred, Value, parse_assignment
from uberdeploy.errors import MissingRequiredConfig


def test_literal_and_deferred_values():
    c = ConfigStore()
    c.set("branch", "main")
    c.set("deploy_to", lambda: f"/srv/{c['branch']}")

    assert c.get("branch") == "main"
    assert c.get("deploy_to") == "/srv/main"


def test_deferred_default_is_memoized_even_when_random():
    c = ConfigStore()
    calls = []

    def port():
        calls.append(1)
        return random.randint(32768, 61000)

    c.set_default("passenger_port", port)
    first = c.get("passenger_port")

    assert all(c.get("passenger_port") == first for _ in range(20))
    assert len(calls) == 1


def test_derived_value_is_not_re_resolved_after_dependency_changes():
    c = ConfigStore()
    c.set("user", "alice")
    c.set("home", lambda: f"/home/{c['user']}")
    assert c["home"] == "/home/alice"

    c.set("user", "bob")
    assert c["home"] == "/home/alice"


def test_set_again_drops_memoized_value():
    c = ConfigStore()
    c.set("n", lambda: 1)
    assert c["n"] == 1
    c.set("n", 2)
    assert c["n"] == 2


def test_set_default_keeps_existing_value():
    c = ConfigStore()
    c.set("keep_releases", 5)
    c.set_default("keep_releases", 3)
    assert c["keep_releases"] == 5


def test_required_key_without_override_fails_with_hint():
    c = ConfigStore()
    c.required("user", "Please configure your user")

    with pytest.raises(MissingRequiredConfig) as exc:
        c.get("user")
    assert exc.value.key == "user"
    assert "Please configure your user" in str(exc.value)


def test_required_key_with_override():
    c = ConfigStore()
    c.set("user", "alice")
    c.required("user")
    assert c["user"] == "alice"


def test_unknown_key_is_missing_required_config():
    with pytest.raises(MissingRequiredConfig) as exc:
        ConfigStore().get("nope")
    assert "nope" in str(exc.value)


def test_fetch_with_default_only_for_unset_keys():
    c = ConfigStore()
    c.set("a", 1)
    assert c.fetch("a", 9) == 1
    assert c.fetch("b", 9) == 9


def test_explicit_value_wrappers():
    c = ConfigStore()
    fn = lambda: "called"  # noqa: E731
    c.set("hook", Value(fn))
    c.set("lazy", Deferred(lambda: 42))
    assert c["hook"] is fn
    assert c["lazy"] == 42


def test_parse_assignment():
    assert parse_assignment("branch=release=1") == ("branch", "release=1")
    assert parse_assignment("domain=") == ("domain", "")
    with pytest.raises(ValueError):
        parse_assignment("novalue")


def test_is_set_and_contains():
    c = ConfigStore()
    c.required("user")
    assert c.is_set("user")
    assert "user" in c
    assert not c.is_set("domain")
