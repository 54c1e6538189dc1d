import re

import pytest

from app.utils.ids import generate_consistent_uuid

UUID_SHAPE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-a[0-9a-f]{3}-[0-9a-f]{8}0000$")


# Values produced by the browser client's implementation
@pytest.mark.parametrize("external_id, expected", [
    ("", "504103b2-5041-4041-a504-504103b20000"),
    ("user_2abcDEF123", "707363df-7073-4073-a707-707363df0000"),
    ("firebase-uid-42", "4066bb6f-4066-4066-a406-4066bb6f0000"),
    ("test_user_123", "30b26067-30b2-40b2-a30b-30b260670000"),
    ("héllo", "7c17c71c-7c17-4c17-a7c1-7c17c71c0000"),
    ("😀emoji", "60406f91-6040-4040-a604-60406f910000"),
])
def test_matches_client_implementation(external_id, expected):
    assert generate_consistent_uuid(external_id) == expected


def test_is_deterministic():
    assert generate_consistent_uuid("abc") == generate_consistent_uuid("abc")


def test_distinct_inputs_usually_differ():
    assert generate_consistent_uuid("user_a") != generate_consistent_uuid("user_b")


def test_output_is_uuid_shaped():
    for external_id in ["x", "user_" + "z" * 200, "12345"]:
        assert UUID_SHAPE.match(generate_consistent_uuid(external_id))
