"""Tests for _registry.py - definitions, aliases, case folding, get/set/validate."""

import logging

import pytest

from appconfig import (
    InvalidOptionError,
    NoSuchVariableError,
    NotInvocableError,
    Registry,
    RegistrySettings,
)


def _registry(**options):
    errors = []
    registry = Registry(error=errors.append, **options)
    return registry, errors


class TestDefine:
    def test_default_is_value_after_define(self):
        registry, _ = _registry()
        registry.define("port", default="8000")
        assert registry.get("port") == "8000"

    def test_no_default_means_absent(self):
        registry, _ = _registry()
        registry.define("name")
        assert registry.get("name") is None
        assert registry.has_value("name") is False
        assert registry.is_defined("name")

    def test_returns_canonical_name(self):
        registry, _ = _registry()
        assert registry.define("Verbose") == "verbose"

    def test_change_hook_fires_once_at_define(self):
        calls = []
        registry, _ = _registry()
        registry.define("level", default="info", on_change=lambda reg, name, value: calls.append((name, value)))
        assert calls == [("level", "info")]

    def test_options_mapping_and_kwargs_combine(self):
        registry, errors = _registry()
        registry.define("one", {"default": 1}, aliases="first")
        assert registry.get("first") == 1
        assert errors == []

    def test_historical_option_spellings(self):
        registry, errors = _registry()
        registry.define("two", {"DEFAULT": 2, "ALIAS": ["second", "runnerup"], "ARGCOUNT": 1})
        assert registry.get("runnerup") == 2
        assert registry.spec("two").argument_required is True
        assert errors == []

    def test_unknown_option_reported_and_skipped(self):
        registry, errors = _registry()
        registry.define("x", default="a", colour="red")
        assert registry.get("x") == "a"
        assert len(errors) == 1
        assert isinstance(errors[0], InvalidOptionError)
        assert "colour" in str(errors[0])

    def test_non_callable_on_change_rejected(self):
        registry, errors = _registry()
        registry.define("x", default="a", on_change="not a function")
        assert isinstance(errors[0], NotInvocableError)
        assert registry.spec("x").on_change is None
        assert registry.get("x") == "a"

    def test_non_callable_validator_rejected(self):
        registry, errors = _registry()
        registry.define("x", validator=42)
        assert isinstance(errors[0], NotInvocableError)
        assert registry.validate("x", "anything") is True

    def test_bad_pattern_rejected(self):
        registry, errors = _registry()
        registry.define("x", validator="(unclosed")
        assert isinstance(errors[0], InvalidOptionError)
        assert registry.validate("x", "anything") is True

    def test_invalid_option_value_falls_back_to_default(self):
        registry, errors = _registry()
        registry.define("x", expand="sometimes")
        assert isinstance(errors[0], InvalidOptionError)
        assert registry.spec("x").expand is True

    def test_alias_cannot_shadow_variable(self):
        registry, errors = _registry()
        registry.define("one")
        registry.define("two", aliases="one")
        assert isinstance(errors[0], InvalidOptionError)
        assert registry.resolve("one") == "one"

    def test_generated_triggers(self):
        registry, _ = _registry()
        registry.define("four", aliases="village", command_triggers=True)
        assert registry.trigger("-four") == "four"
        assert registry.trigger("-village") == "four"

    def test_explicit_triggers(self):
        registry, _ = _registry()
        registry.define("three", command_triggers=["-3", "--three"])
        assert registry.trigger("-3") == "three"
        assert registry.trigger("--three") == "three"
        assert registry.trigger("-three") is None

    def test_global_options_apply_beneath_local(self):
        registry, _ = _registry(global_options={"argument_required": True, "command_triggers": True})
        registry.define("one")
        registry.define("four", argument_required=False)
        assert registry.spec("one").argument_required is True
        assert registry.spec("four").argument_required is False
        assert registry.trigger("-one") == "one"


class TestResolve:
    def test_alias_resolves_to_canonical(self):
        registry, _ = _registry()
        registry.define("one", aliases="first")
        assert registry.resolve("first") == "one"

    def test_resolution_is_idempotent(self):
        registry, _ = _registry()
        registry.define("two", aliases=["second", "runnerup"])
        for name in ("two", "second", "RunnerUp"):
            assert registry.resolve(name) == registry.resolve(registry.resolve(name))

    def test_single_hop_only(self):
        registry, _ = _registry()
        registry.define("one", aliases="first")
        registry.add_alias("chained", "first")
        assert registry.resolve("chained") == "first"
        with pytest.raises(NoSuchVariableError):
            registry.get("chained")

    def test_alias_to_undefined_target_fails_until_defined(self):
        registry, _ = _registry()
        assert registry.add_alias("Pending", "Target") is True
        with pytest.raises(NoSuchVariableError):
            registry.get("pending")
        registry.define("target", default="ok")
        assert registry.get("PENDING") == "ok"

    def test_add_alias_rejects_variable_name(self):
        registry, errors = _registry()
        registry.define("one")
        assert registry.add_alias("one", "two") is False
        assert isinstance(errors[0], InvalidOptionError)


class TestCaseFolding:
    def test_case_insensitive_by_default(self):
        registry, _ = _registry()
        registry.define("Foo", default="bar")
        assert registry.get("foo") == registry.get("FOO") == registry.get("Foo") == "bar"
        registry.set("FOO", "baz")
        assert registry.get("foo") == "baz"

    def test_case_sensitive_names_are_distinct(self):
        registry, _ = _registry(case_sensitive=True)
        registry.define("Foo", default="upper")
        registry.define("foo", default="lower")
        assert registry.get("Foo") == "upper"
        assert registry.get("foo") == "lower"
        with pytest.raises(NoSuchVariableError):
            registry.get("FOO")

    def test_case_sensitive_aliases(self):
        registry, _ = _registry(case_sensitive=True)
        registry.define("Level", aliases="L")
        assert registry.resolve("L") == "Level"
        assert registry.resolve("l") == "l"


class TestValues:
    def test_undefined_get_raises(self):
        registry, _ = _registry()
        with pytest.raises(NoSuchVariableError, match="nothing"):
            registry.get("nothing")

    def test_undefined_set_raises(self):
        registry, _ = _registry()
        with pytest.raises(NoSuchVariableError):
            registry.set("nothing", 1)

    def test_falsy_values_are_real_values(self):
        registry, _ = _registry()
        registry.define("zero", default=0)
        registry.define("empty", default="")
        registry.define("off", default=False)
        assert registry.get("zero") == 0
        assert registry.get("empty") == ""
        assert registry.get("off") is False
        assert registry.has_value("zero")

    def test_set_none_clears(self):
        registry, _ = _registry()
        registry.define("x", default="a")
        registry.set("x", None)
        assert registry.has_value("x") is False
        assert registry.get("x") is None

    def test_set_returns_true_without_hook(self):
        registry, _ = _registry()
        registry.define("x")
        assert registry.set("x", "v") is True

    def test_set_returns_hook_result(self):
        registry, _ = _registry()
        registry.define("x", on_change=lambda reg, name, value: f"{name}={value}")
        assert registry.set("X", "v") == "x=v"

    def test_hook_receives_registry(self):
        seen = []
        registry, _ = _registry()
        registry.define("x", on_change=lambda reg, name, value: seen.append(reg))
        registry.set("x", 1)
        assert seen == [registry, registry]

    def test_set_does_not_validate(self):
        registry, _ = _registry()
        registry.define("port", validator=r"^\d+$")
        registry.set("port", "abc")
        assert registry.get("port") == "abc"

    def test_reset_restores_default(self):
        registry, _ = _registry()
        registry.define("x", default="a")
        registry.set("x", "b")
        registry.reset("x")
        assert registry.get("x") == "a"

    def test_as_dict(self):
        registry, _ = _registry()
        registry.define("one", default=1)
        registry.define("two")
        assert registry.as_dict() == {"one": 1, "two": None}

    def test_contains_and_names(self):
        registry, _ = _registry()
        registry.define("one", aliases="first")
        registry.define("two")
        assert "FIRST" in registry
        assert "three" not in registry
        assert registry.names() == ["one", "two"]


class TestValidate:
    def test_no_validator_accepts_anything(self):
        registry, _ = _registry()
        registry.define("x")
        assert registry.validate("x", object()) is True

    def test_pattern_validator(self):
        registry, _ = _registry()
        registry.define("port", validator=r"\d+")
        assert registry.validate("port", "8080") is True
        assert registry.validate("port", "abc") is False

    def test_predicate_gets_canonical_name(self):
        seen = []

        def check(name, value):
            seen.append(name)
            return value in ("a", "b")

        registry, _ = _registry()
        registry.define("choice", aliases="c", validator=check)
        assert registry.validate("C", "a") is True
        assert registry.validate("c", "z") is False
        assert seen == ["choice", "choice"]

    def test_validate_undefined_raises(self):
        registry, _ = _registry()
        with pytest.raises(NoSuchVariableError):
            registry.validate("nothing", 1)


class TestSettings:
    def test_defaults(self):
        registry = Registry()
        assert registry.settings.case_sensitive is False
        assert registry.settings.end_of_args == "--"
        assert registry.settings.cmd_env is None

    def test_settings_object(self):
        registry = Registry(RegistrySettings(end_of_args="---"))
        assert registry.settings.end_of_args == "---"

    def test_settings_mapping_with_historical_keys(self):
        registry = Registry({"CASE": 1, "ENDOFARGS": "--end", "CMDENV": "OPTS"})
        assert registry.case_sensitive is True
        assert registry.settings.end_of_args == "--end"
        assert registry.settings.cmd_env == "OPTS"

    def test_unknown_setting_reported(self):
        registry, errors = _registry(verbose=True)
        assert len(errors) == 1
        assert isinstance(errors[0], InvalidOptionError)
        assert "verbose" in str(errors[0])

    def test_non_callable_hook_reported(self):
        registry, errors = _registry(line_parse="nope")
        assert isinstance(errors[0], NotInvocableError)
        assert registry.settings.line_parse is None

    def test_bad_global_option_reported(self):
        registry, errors = _registry(global_options={"colour": "red"})
        assert isinstance(errors[0], InvalidOptionError)

    def test_default_sink_logs_warning(self, caplog):
        registry = Registry()
        with caplog.at_level(logging.WARNING, logger="appconfig"):
            registry.define("x", colour="red")
        assert "colour is not a valid configuration option" in caplog.text


class TestDump:
    def test_lists_variables_aliases_and_triggers(self):
        registry, _ = _registry()
        registry.define("one", default=1, aliases="first", command_triggers="-1")
        text = registry.dump()
        assert "VARIABLES" in text
        assert "  one" in text
        assert "first" in text
        assert "-1" in text
        assert "insensitive" in text
