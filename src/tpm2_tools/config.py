# SPDX-License-Identifier: BSD-2
import json
import os
import pkgutil
from typing import Dict, Mapping, Optional

CONFIG = json.loads(pkgutil.get_data(__package__, "config.json").decode())

# environment variables overriding the packaged defaults
ENV_OVERRIDES = {
    "tcti": "TPM2TOOLS_TCTI",
    "log_level": "TPM2TOOLS_LOG_LEVEL",
    "hierarchy": "TPM2TOOLS_HIERARCHY",
}


def load_config(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Returns the packaged defaults with the environment overrides applied."""
    if environ is None:
        environ = os.environ
    config = dict(CONFIG)
    for key, var in ENV_OVERRIDES.items():
        if environ.get(var):
            config[key] = environ[var]
    return config


_config = load_config()

TCTI = _config.get("tcti")
LOG_LEVEL = _config.get("log_level", "warning")
HIERARCHY = _config.get("hierarchy", "owner")
