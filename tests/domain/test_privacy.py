from __future__ import annotations

from lib_error_gate.domain.privacy import INVALID_EMAIL, anonymise_user, hash_email, hash_user_id
from lib_error_gate.domain.signature import string_hash


def test_user_id_hash_shares_the_signature_hash() -> None:
    assert hash_user_id("42") == f"user_{string_hash('42')}"
    assert hash_user_id("42") == hash_user_id("42")


def test_email_keeps_domain_and_hashes_local_part() -> None:
    assert hash_email("ab@x.io") == "user_2e9@x.io"


def test_email_without_domain_is_reported_invalid() -> None:
    assert hash_email("ann") == INVALID_EMAIL
    assert hash_email("ann@") == INVALID_EMAIL


def test_anonymise_user_drops_credentials_and_keeps_other_fields() -> None:
    user = anonymise_user({"id": "a", "token": "t", "password": "p", "role": "admin"})

    assert user == {"id": "user_2p", "email": None, "username": None, "data": {"role": "admin"}}


def test_anonymise_user_without_extra_fields_has_no_data() -> None:
    assert anonymise_user({"email": "a@b.c"}) == {"id": None, "email": "user_2p@b.c", "username": None}
