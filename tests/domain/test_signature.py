from __future__ import annotations

import pytest

from lib_error_gate.domain.occurrence import ErrorOccurrence
from lib_error_gate.domain.signature import derive_signature, string_hash


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", "0"),
        ("a", "2p"),
        ("ab", "2e9"),
        ("polygenelubricants", "zik0zk"),
        ("\U0001F600", "11zz7"),
    ],
)
def test_string_hash_matches_known_vectors(text: str, expected: str) -> None:
    assert string_hash(text) == expected


def test_string_hash_is_absolute_value_of_signed_result() -> None:
    # folds to -2**31 before the absolute value is taken
    assert not string_hash("polygenelubricants").startswith("-")


def test_signature_is_deterministic() -> None:
    context = {"component": "cart", "action": "checkout"}
    assert derive_signature("boom", context) == derive_signature("boom", dict(context))


def test_signature_ignores_non_allow_listed_context() -> None:
    base = derive_signature("boom", {"component": "cart"})
    assert derive_signature("boom", {"component": "cart", "user_id": 42, "session": "x"}) == base


@pytest.mark.parametrize("field", ["component", "action", "url"])
def test_signature_distinguishes_allow_listed_context(field: str) -> None:
    assert derive_signature("boom", {field: "a"}) != derive_signature("boom", {field: "b"})


def test_signature_distinguishes_name_and_message() -> None:
    assert derive_signature(ErrorOccurrence("TypeError", "boom")) != derive_signature(ErrorOccurrence("ValueError", "boom"))
    assert derive_signature("boom") != derive_signature("bang")


def test_none_context_values_are_omitted() -> None:
    assert derive_signature("boom", {"component": None}) == derive_signature("boom", {})


def test_missing_context_differs_from_empty_mapping() -> None:
    assert derive_signature("boom", None) == derive_signature("boom", "not-a-mapping")  # type: ignore[arg-type]
    assert derive_signature("boom", None) != derive_signature("boom", {})


def test_signature_uses_only_first_three_stack_lines() -> None:
    head = "a\nb\nc"
    first = ErrorOccurrence("Error", "boom", head + "\nd")
    second = ErrorOccurrence("Error", "boom", head + "\nzzz\nyyy")
    third = ErrorOccurrence("Error", "boom", "a\nb\nX")
    assert derive_signature(first) == derive_signature(second)
    assert derive_signature(first) != derive_signature(third)


def test_signature_matches_documented_hash_input() -> None:
    occurrence = ErrorOccurrence("Error", "boom", "l1\nl2")
    context = {"url": "/x", "component": "cart"}
    expected = string_hash('Error:boom:l1\nl2:{"component":"cart","url":"/x"}')
    assert derive_signature(occurrence, context) == expected


def test_signature_tolerates_unserialisable_context_values() -> None:
    class Opaque:
        def __str__(self) -> str:
            return "opaque"

    assert derive_signature("boom", {"component": Opaque()}) == derive_signature("boom", {"component": "opaque"})


def test_signature_keeps_non_ascii_verbatim() -> None:
    expected = string_hash('Error:boom::{"component":"äöü"}')
    assert derive_signature("boom", {"component": "äöü"}) == expected


def test_signature_survives_context_values_whose_str_raises() -> None:
    class Hostile:
        def __str__(self) -> str:
            raise RuntimeError("no str")

    expected = string_hash('Error:boom::{"component":"<Hostile>"}')
    assert derive_signature("boom", {"component": Hostile()}) == expected
