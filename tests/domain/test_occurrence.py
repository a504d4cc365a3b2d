from __future__ import annotations

from types import SimpleNamespace

from lib_error_gate.domain.occurrence import DEFAULT_ERROR_NAME, ErrorOccurrence, normalise_error


def _raise_nested() -> None:
    def inner() -> None:
        raise ValueError("inner failure")

    inner()


def test_string_becomes_default_named_occurrence() -> None:
    assert normalise_error("boom") == ErrorOccurrence(DEFAULT_ERROR_NAME, "boom")


def test_exception_uses_class_name_and_message() -> None:
    occurrence = normalise_error(KeyError("missing"))
    assert occurrence.name == "KeyError"
    assert occurrence.message == "'missing'"
    assert occurrence.stack is None


def test_raised_exception_stack_lists_innermost_frame_first() -> None:
    try:
        _raise_nested()
    except ValueError as exc:
        occurrence = normalise_error(exc)
    assert occurrence.stack is not None
    lines = occurrence.stack.split("\n")
    assert lines[0].endswith("in inner")
    assert "in _raise_nested" in lines[1]


def test_mapping_fields_are_used() -> None:
    occurrence = normalise_error({"name": "HttpError", "message": "502", "stack": "s1\ns2"})
    assert occurrence == ErrorOccurrence("HttpError", "502", "s1\ns2")


def test_error_like_object_fields_are_used() -> None:
    occurrence = normalise_error(SimpleNamespace(name="Custom", message="oops"))
    assert occurrence.name == "Custom"
    assert occurrence.message == "oops"


def test_missing_or_empty_inputs_degrade_to_defaults() -> None:
    assert normalise_error(None) == ErrorOccurrence(DEFAULT_ERROR_NAME, "")
    assert normalise_error({}) == ErrorOccurrence(DEFAULT_ERROR_NAME, "")
    assert normalise_error(42) == ErrorOccurrence(DEFAULT_ERROR_NAME, "42")


def test_hostile_str_does_not_raise() -> None:
    class Hostile:
        def __str__(self) -> str:
            raise RuntimeError("no")

    assert normalise_error(Hostile()).message == "<Hostile>"


def test_stack_head_limits_lines() -> None:
    occurrence = ErrorOccurrence("E", "m", "1\n2\n3\n4\n5")
    assert occurrence.stack_head() == "1\n2\n3"
    assert occurrence.stack_head(1) == "1"


def test_raising_attribute_access_does_not_raise() -> None:
    class BrokenMessage:
        name = "Custom"

        @property
        def message(self) -> str:
            raise RuntimeError("boom")

    assert normalise_error(BrokenMessage()) == ErrorOccurrence("Custom", "")


def test_raising_properties_only_fall_back_to_str() -> None:
    class BrokenEverything:
        @property
        def message(self) -> str:
            raise RuntimeError("boom")

        def __str__(self) -> str:
            return "broken everything"

    assert normalise_error(BrokenEverything()) == ErrorOccurrence(DEFAULT_ERROR_NAME, "broken everything")


def test_exception_with_hostile_str_keeps_class_name() -> None:
    class Grumpy(Exception):
        def __str__(self) -> str:
            raise RuntimeError("no")

    occurrence = normalise_error(Grumpy())
    assert occurrence.name == "Grumpy"
    assert occurrence.message == "<Grumpy>"
