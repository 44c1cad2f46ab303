"""Tests for deterministic body serialization."""

import json
import math

import pytest

from payware_auth.core.canonical import canonicalize, is_consistent, serialize_payload


def test_keys_sorted_regardless_of_insertion_order():
    first = {"currency": "EUR", "amount": "10.00", "reasonL1": "x"}
    second = {"reasonL1": "x", "amount": "10.00", "currency": "EUR"}

    assert canonicalize(first) == '{"amount":"10.00","currency":"EUR","reasonL1":"x"}'
    assert canonicalize(second) == canonicalize(first)
    assert is_consistent(first, second)


def test_nested_objects_sorted_and_arrays_keep_order():
    value = {"b": [3, 1, {"d": 1, "c": 2}], "a": {"z": None, "y": True}}

    assert canonicalize(value) == '{"a":{"y":true,"z":null},"b":[3,1,{"c":2,"d":1}]}'


def test_repeated_calls_are_identical():
    value = {"options": {"timeToLive": 120, "callbackUrl": "https://x"}, "amount": "1"}

    assert canonicalize(value) == canonicalize(value)


def test_scalars_and_none():
    assert canonicalize(None) == "null"
    assert canonicalize("text") == '"text"'
    assert canonicalize(12.5) == "12.5"
    assert canonicalize([2, 1]) == "[2,1]"


def test_non_ascii_kept_as_utf8():
    assert canonicalize({"reasonL1": "Café €"}) == '{"reasonL1":"Café €"}'


def test_nan_is_rejected():
    with pytest.raises(ValueError):
        canonicalize({"amount": math.nan})


def test_serialize_payload_passes_strings_through():
    raw = '{"b":1,"a":2}'

    assert serialize_payload(raw) is raw
    assert serialize_payload({"b": 1, "a": 2}) == '{"a":2,"b":1}'


def test_serialize_payload_absent_body():
    assert serialize_payload(None) is None
    assert serialize_payload("") is None
    assert serialize_payload(False) is None
    assert serialize_payload(0) is None
    assert serialize_payload(0.0) is None
    assert serialize_payload({}) == "{}"
    assert serialize_payload([]) == "[]"
    assert serialize_payload(1) == "1"
    assert serialize_payload(True) == "true"


def test_inconsistent_values():
    assert not is_consistent({"amount": "1.00"}, {"amount": "1.0"})


def test_lone_surrogates_are_escaped():
    value = json.loads('{"a":"x\\ud800y","\\udfff":1}')

    text = canonicalize(value)

    assert text == '{"a":"x\\ud800y","\\udfff":1}'
    assert text.isascii()
    assert json.loads(text) == value
