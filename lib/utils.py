"""
Common utilities for the OpenCage geocode client.
"""

import json
import logging
import os
import re
from typing import Any, Dict, Iterable, Optional
from urllib.parse import quote

logger = logging.getLogger(__name__)

MASKED_PLACEHOLDER = "***MASKED***"


def jsonDumps(data: Any, compact: Optional[bool] = None, **kwargs) -> str:
    dumpKwargs = {
        "ensure_ascii": False,
        "default": str,
        "sort_keys": True,
    }

    if compact is None:
        # If indent is passed, then user want pretty-printed JSON,
        #  no need to use compact separators
        compact = "indent" not in kwargs

    if compact:
        dumpKwargs["separators"] = (",", ":")
    dumpKwargs.update(kwargs)
    return json.dumps(data, **dumpKwargs)


def load_dotenv(path: str = ".env", populateEnv: bool = True) -> Dict[str, str]:
    """
    Simple dotenv file loader.
    Read file line by line and put key-value pairs into dictionary.
    Empty lines and lines starting with `#` are skipped, optional `export ` prefix is allowed.

    Args:
        path: Path to .env file (default ".env")
        populateEnv: Whether to populate environment variables (default True).
            Variables which are already set in the environment are not overwritten.

    Returns:
        Dictionary of key-value pairs from .env file
    """
    ret: Dict[str, str] = {}
    with open(path, "rt", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export ") :].strip()
            if not key:
                continue
            ret[key] = value.strip().strip('"').strip("'")

    if populateEnv:
        for k, v in ret.items():
            os.environ.setdefault(k, v)
    return ret


def maskSecrets(text: str, secrets: Iterable[Optional[str]]) -> str:
    """
    Replace every occurrence of given secrets (and their URL-escaped forms) in text.

    Args:
        text: Text to mask secrets in
        secrets: Secret values, empty values are ignored

    Returns:
        Text with secrets replaced by masked placeholder
    """
    if not text:
        return text

    result = text
    for secret in secrets:
        if not secret:
            continue
        for variant in {secret, quote(secret, safe="")}:
            result = result.replace(variant, MASKED_PLACEHOLDER)
    return result


def maskQueryParam(url: str, name: str) -> str:
    """
    Replace value of query parameter `name` in url with masked placeholder.
    """
    pattern = re.compile(rf"([?&]{re.escape(name)}=)[^&#]*")
    return pattern.sub(rf"\g<1>{MASKED_PLACEHOLDER}", url)
