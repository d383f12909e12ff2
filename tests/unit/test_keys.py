"""
Tests for the single-table key scheme (core/keys.py).
"""

import pytest

from user_store.core import keys


class TestUserKeys:

    def test_user_key_partition_equals_sort(self):
        pk, sk = keys.user_key("01H4E0XFKZ2SRKBR29GQRFPV30")

        assert pk == "USER#01H4E0XFKZ2SRKBR29GQRFPV30"
        assert sk == pk

    def test_primary_key_map(self):
        assert keys.primary_key("abc") == {"PK": "USER#abc", "SK": "USER#abc"}

    def test_email_index_key(self):
        gsi1pk, gsi1sk = keys.email_index_key("ada@example.com", "ada")

        assert gsi1pk == "EMAIL#ada@example.com"
        assert gsi1sk == "USERNAME#ada"

    def test_index_attributes(self):
        assert keys.index_attributes("ada@example.com", "ada") == {
            "GSI1PK": "EMAIL#ada@example.com",
            "GSI1SK": "USERNAME#ada",
        }


class TestIsUserKey:

    @pytest.mark.parametrize("pk,sk", [
        ("USER#abc", "USER#abc"),
        ("USER#01H4E0XFKZ2SRKBR29GQRFPV30", "USER#01H4E0XFKZ2SRKBR29GQRFPV30"),
    ])
    def test_accepts_user_keys(self, pk, sk):
        assert keys.is_user_key(pk, sk)

    @pytest.mark.parametrize("pk,sk", [
        ("USER#abc", "USER#xyz"),     # mismatched halves
        ("USER#", "USER#"),           # empty id
        ("EMAIL#a@b.io", "EMAIL#a@b.io"),
        ("", ""),
        ("user#abc", "user#abc"),     # prefix is case sensitive
    ])
    def test_rejects_other_keys(self, pk, sk):
        assert not keys.is_user_key(pk, sk)
