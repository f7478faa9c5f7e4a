import pytest

from codewars.core.config import JudgeConfig, _normalise_judge_url


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("localhost", "http://localhost:2358"),
        ("judge.internal/", "http://judge.internal:2358"),
        ("http://10.0.0.5", "http://10.0.0.5:2358"),
        ("http://10.0.0.5:9000/", "http://10.0.0.5:9000"),
        ("https://judge0-ce.p.rapidapi.com", "https://judge0-ce.p.rapidapi.com"),
        ("https://judge.example.com:8443/", "https://judge.example.com:8443"),
        ("   ", ""),
        (None, ""),
    ],
)
def test_normalise_judge_url(raw, expected):
    assert _normalise_judge_url(raw) == expected


def test_judge_config_headers_are_read_only():
    source = {"X-Auth-Token": "s3cret"}
    config = JudgeConfig(base_url="http://judge.test:2358", auth_headers=source)

    source["X-Auth-Token"] = "changed"
    assert config.auth_headers["X-Auth-Token"] == "s3cret"
    with pytest.raises(TypeError):
        config.auth_headers["X-Auth-Token"] = "other"


def test_judge_config_configured_tracks_base_url():
    assert JudgeConfig(base_url="http://judge.test:2358").configured
    assert not JudgeConfig(base_url="").configured
