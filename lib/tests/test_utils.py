"""
Test suite for lib/utils.py
"""

import json
import os

import pytest

from lib.utils import MASKED_PLACEHOLDER, jsonDumps, load_dotenv, maskQueryParam, maskSecrets


class TestLoadDotenv:
    """Tests for dotenv reader"""

    def test_parse_lines(self, tmp_path):
        envFile = tmp_path / ".env"
        envFile.write_text(
            "# comment\n"
            "\n"
            "PLAIN=value\n"
            'QUOTED="quoted value"\n'
            "export EXPORTED=1\n"
            "WITH_EQUALS=a=b=c\n"
            "garbage line\n"
        )

        values = load_dotenv(str(envFile), populateEnv=False)

        assert values == {
            "PLAIN": "value",
            "QUOTED": "quoted value",
            "EXPORTED": "1",
            "WITH_EQUALS": "a=b=c",
        }

    def test_populate_env_does_not_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OC_TEST_EXISTING", "original")
        monkeypatch.delenv("OC_TEST_NEW", raising=False)
        envFile = tmp_path / ".env"
        envFile.write_text("OC_TEST_EXISTING=changed\nOC_TEST_NEW=added\n")

        load_dotenv(str(envFile))

        assert os.environ["OC_TEST_EXISTING"] == "original"
        assert os.environ["OC_TEST_NEW"] == "added"
        monkeypatch.delenv("OC_TEST_NEW")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_dotenv(str(tmp_path / "missing.env"))


def test_json_dumps_compact_and_pretty():
    data = {"b": 1, "a": "Ü"}
    assert jsonDumps(data) == '{"a":"Ü","b":1}'
    assert json.loads(jsonDumps(data, indent=2)) == data
    assert "\n" in jsonDumps(data, indent=2)


def test_mask_secrets():
    text = "url?key=se%2Fcret&other=se/cret"
    assert maskSecrets(text, ["se/cret", None, ""]) == f"url?key={MASKED_PLACEHOLDER}&other={MASKED_PLACEHOLDER}"
    assert maskSecrets("", ["x"]) == ""


def test_mask_query_param():
    url = "https://api.test/json?q=key%3D1&key=abc123&pretty=1"
    assert maskQueryParam(url, "key") == f"https://api.test/json?q=key%3D1&key={MASKED_PLACEHOLDER}&pretty=1"
    assert maskQueryParam("https://api.test/json?q=x", "key") == "https://api.test/json?q=x"
