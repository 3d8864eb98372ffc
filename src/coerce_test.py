from __future__ import annotations

import itertools

import pytest

from uberdeploy.coerce import RAILS_ENVIRONMENTS, coerce_bool, coerce_choice, config_flag, env_flag
from uberdeploy.errors import InvalidBooleanLiteral


@pytest.mark.parametrize("raw,expected", [
    ("YES", True),
    ("true", True),
    ("True", True),
    ("no", False),
    ("FALSE", False),
])
def test_boolean_words(raw, expected):
    assert coerce_bool(raw) is expected


def test_unknown_word_without_classifier():
    with pytest.raises(InvalidBooleanLiteral) as exc:
        coerce_bool("maybe")
    assert exc.value.input == "maybe"


def test_classifier_match_is_accepted():
    assert coerce_bool("staging", lambda s: s == "staging") is True


def test_classifier_without_match_fails():
    with pytest.raises(InvalidBooleanLiteral) as exc:
        coerce_bool("maybe", lambda s: None)
    assert "no classifier match" in str(exc.value)


def test_non_idempotent_classifier_fails():
    flips = itertools.cycle([True, False])

    with pytest.raises(InvalidBooleanLiteral) as exc:
        coerce_bool("maybe", lambda s: next(flips))
    assert "not idempotent" in str(exc.value)


def test_classifier_is_not_consulted_for_boolean_words():
    def classifier(s):
        raise AssertionError("should not be called")

    assert coerce_bool("no", classifier) is False


def test_choice_reports_matched_environment():
    result = coerce_choice("production", RAILS_ENVIRONMENTS)
    assert result.value is True
    assert result.matched == "production"


def test_choice_with_boolean_word_has_no_match():
    assert coerce_choice("yes", RAILS_ENVIRONMENTS).matched is None
    assert coerce_choice("false", RAILS_ENVIRONMENTS).value is False


def test_choice_is_case_sensitive_for_environments():
    with pytest.raises(InvalidBooleanLiteral):
        coerce_choice("Production", RAILS_ENVIRONMENTS)


def test_env_flag_default():
    assert env_flag(None, "true") is True
    assert env_flag("no", "true") is False


@pytest.mark.parametrize("value,expected", [
    (True, True),
    (False, False),
    (1, True),
    (0, False),
    ("1", True),
    ("0", False),
    ("false", False),
    ("No", False),
    ("yes", True),
])
def test_config_flag(value, expected):
    assert config_flag(value) is expected


def test_config_flag_rejects_unknown_strings():
    with pytest.raises(InvalidBooleanLiteral):
        config_flag("2")
