import pytest

from codewars.features.judge0 import languages


@pytest.mark.parametrize(
    "key, judge_id",
    [("python", 71), ("java", 62), ("c", 50), (" Python ", 71)],
)
def test_resolve_known_keys(key, judge_id):
    lang = languages.resolve(key)
    assert lang is not None
    assert lang.id == judge_id


@pytest.mark.parametrize("key", ["ruby", "", None, "cpp"])
def test_resolve_unknown_keys(key):
    assert languages.resolve(key) is None


def test_supported_keys_sorted():
    assert languages.supported_keys() == ["c", "java", "python"]
    assert [lang.key for lang in languages.list_languages()] == ["c", "java", "python"]
