"""
Unit tests for API key resolution
"""

import pytest

from lib.opencage.constants import API_KEY_ENV_VAR
from lib.opencage.credentials import DictEnvironment, EnvironmentScope, SystemEnvironment, resolveApiKey
from lib.opencage.exceptions import MissingCredentialError


class CountingEnvironment(DictEnvironment):
    """DictEnvironment which records every lookup"""

    def __init__(self, scopes=None):
        super().__init__(scopes)
        self.calls = []

    def lookup(self, scope, name):
        self.calls.append((scope, name))
        return super().lookup(scope, name)


def test_explicit_key_wins():
    """Test explicit key is used without looking into environment, dood!"""
    env = CountingEnvironment({EnvironmentScope.PROCESS: {API_KEY_ENV_VAR: "from_env"}})
    assert resolveApiKey("  explicit  ", env) == "explicit"
    assert env.calls == []


@pytest.mark.parametrize("explicitKey", [None, "", "   "])
def test_blank_explicit_key_falls_back_to_environment(explicitKey):
    env = DictEnvironment({EnvironmentScope.PROCESS: {API_KEY_ENV_VAR: "from_process"}})
    assert resolveApiKey(explicitKey, env) == "from_process"


def test_scopes_are_probed_in_order():
    env = CountingEnvironment(
        {
            EnvironmentScope.PROCESS: {API_KEY_ENV_VAR: "  "},
            EnvironmentScope.USER: {API_KEY_ENV_VAR: "from_user"},
            EnvironmentScope.MACHINE: {API_KEY_ENV_VAR: "from_machine"},
        }
    )
    assert resolveApiKey(None, env) == "from_user"
    assert env.calls == [
        (EnvironmentScope.PROCESS, API_KEY_ENV_VAR),
        (EnvironmentScope.USER, API_KEY_ENV_VAR),
    ]


def test_machine_scope_is_last_resort():
    env = DictEnvironment({EnvironmentScope.MACHINE: {API_KEY_ENV_VAR: "from_machine"}})
    assert resolveApiKey(None, env) == "from_machine"


def test_missing_key_message():
    """Test error names both env variable and override parameter, dood!"""
    with pytest.raises(MissingCredentialError) as excInfo:
        resolveApiKey(None, DictEnvironment())
    assert API_KEY_ENV_VAR in str(excInfo.value)
    assert "apiKey" in str(excInfo.value)


def test_no_caching_between_calls():
    env = DictEnvironment({EnvironmentScope.PROCESS: {API_KEY_ENV_VAR: "first"}})
    assert resolveApiKey(None, env) == "first"
    env.scopes[EnvironmentScope.PROCESS][API_KEY_ENV_VAR] = "second"
    assert resolveApiKey(None, env) == "second"


def test_system_environment_process_scope(monkeypatch, tmp_path):
    monkeypatch.setenv(API_KEY_ENV_VAR, "process_key")
    env = SystemEnvironment(userEnvFile=tmp_path / "missing.env", machineEnvFile=None)
    assert env.lookup(EnvironmentScope.PROCESS, API_KEY_ENV_VAR) == "process_key"
    assert resolveApiKey(None, env) == "process_key"


def test_system_environment_files(monkeypatch, tmp_path):
    """Test user and machine scopes are read from dotenv files"""
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
    userFile = tmp_path / "user.env"
    machineFile = tmp_path / "machine.env"
    userFile.write_text("# user settings\nOTHER=1\n")
    machineFile.write_text(f'export {API_KEY_ENV_VAR}="machine_key"\n')

    env = SystemEnvironment(userEnvFile=userFile, machineEnvFile=machineFile)

    assert env.lookup(EnvironmentScope.USER, API_KEY_ENV_VAR) is None
    assert env.lookup(EnvironmentScope.MACHINE, API_KEY_ENV_VAR) == "machine_key"
    assert resolveApiKey(None, env) == "machine_key"

    userFile.write_text(f"{API_KEY_ENV_VAR}=user_key\n")
    assert resolveApiKey(None, env) == "user_key"


def test_system_environment_injected_process_env():
    env = SystemEnvironment(userEnvFile=None, machineEnvFile=None, processEnv={})
    with pytest.raises(MissingCredentialError):
        resolveApiKey(None, env)


def test_system_environment_undecodable_file(tmp_path):
    """Test env file with broken encoding counts as absent, dood!"""
    userFile = tmp_path / "user.env"
    userFile.write_bytes(b"OPENCAGE_API_KEY=\xff\xfe\n")
    env = SystemEnvironment(userEnvFile=userFile, machineEnvFile=None, processEnv={})

    assert env.lookup(EnvironmentScope.USER, API_KEY_ENV_VAR) is None
    with pytest.raises(MissingCredentialError):
        resolveApiKey(None, env)
