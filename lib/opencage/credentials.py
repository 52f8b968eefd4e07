"""
API Key Resolution

Resolves API key from an explicit value or from layered environment scopes
(process, user, machine), first non-empty match wins. Nothing is cached:
every call looks the key up again.
"""

import logging
import os
from enum import StrEnum
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, Sequence

import lib.utils as utils

from .constants import API_KEY_ENV_VAR, API_KEY_OVERRIDE_PARAM
from .exceptions import MissingCredentialError

logger = logging.getLogger(__name__)

DEFAULT_USER_ENV_FILE = Path("~/.config/opencage/opencage.env")
DEFAULT_MACHINE_ENV_FILE = Path("/etc/opencage/opencage.env")


class EnvironmentScope(StrEnum):
    """Named lookup scopes, probed in declaration order."""

    PROCESS = "process"
    USER = "user"
    MACHINE = "machine"


SCOPE_ORDER: Sequence[EnvironmentScope] = (EnvironmentScope.PROCESS, EnvironmentScope.USER, EnvironmentScope.MACHINE)


class EnvironmentLookup(Protocol):
    """Read-only named-scope key/value lookup."""

    def lookup(self, scope: EnvironmentScope, name: str) -> Optional[str]: ...


class SystemEnvironment:
    """Default EnvironmentLookup backed by real environment, dood!

    - PROCESS: os.environ
    - USER: dotenv file in user config dir (~/.config/opencage/opencage.env)
    - MACHINE: system wide dotenv file (/etc/opencage/opencage.env)

    Missing or unreadable files are treated as "value is absent".
    """

    def __init__(
        self,
        userEnvFile: Optional[Path | str] = DEFAULT_USER_ENV_FILE,
        machineEnvFile: Optional[Path | str] = DEFAULT_MACHINE_ENV_FILE,
        processEnv: Optional[Mapping[str, str]] = None,
    ):
        self.processEnv = processEnv
        self.scopeFiles: Dict[EnvironmentScope, Optional[Path]] = {
            EnvironmentScope.USER: Path(userEnvFile).expanduser() if userEnvFile else None,
            EnvironmentScope.MACHINE: Path(machineEnvFile).expanduser() if machineEnvFile else None,
        }

    def _readFile(self, path: Optional[Path]) -> Dict[str, str]:
        if path is None or not path.is_file():
            return {}
        try:
            return utils.load_dotenv(str(path), populateEnv=False)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Unable to read environment file {path}: {e}")
            return {}

    def lookup(self, scope: EnvironmentScope, name: str) -> Optional[str]:
        if scope == EnvironmentScope.PROCESS:
            env = self.processEnv if self.processEnv is not None else os.environ
            return env.get(name)
        return self._readFile(self.scopeFiles.get(scope)).get(name)


class DictEnvironment:
    """EnvironmentLookup over plain dicts, one per scope."""

    def __init__(self, scopes: Optional[Mapping[EnvironmentScope, Mapping[str, str]]] = None):
        self.scopes = {scope: dict(values) for scope, values in (scopes or {}).items()}

    def lookup(self, scope: EnvironmentScope, name: str) -> Optional[str]:
        return self.scopes.get(scope, {}).get(name)


def resolveApiKey(
    explicitKey: Optional[str] = None,
    environment: Optional[EnvironmentLookup] = None,
    envVar: str = API_KEY_ENV_VAR,
) -> str:
    """Resolve API key, dood!

    Args:
        explicitKey: Key given by caller, wins if non-empty after trimming
        environment: Scope lookup (default: SystemEnvironment)
        envVar: Name of variable to look up

    Returns:
        API key

    Raises:
        MissingCredentialError: if no key was found in any scope
    """
    if explicitKey is not None and explicitKey.strip():
        return explicitKey.strip()

    if environment is None:
        environment = SystemEnvironment()

    for scope in SCOPE_ORDER:
        value = environment.lookup(scope, envVar)
        if value is not None and value.strip():
            logger.debug(f"Using API key from {scope} scope")
            return value.strip()

    raise MissingCredentialError(
        f"No API key found: set the {envVar} environment variable "
        f"or pass the key explicitly via the '{API_KEY_OVERRIDE_PARAM}' parameter"
    )
