from __future__ import annotations

from typing import Any, Dict, List

# Common aliases used across the CLI

JSON = Dict[str, Any]
# config.json as written onto provisioning media; field names are read by the
# device supervisor and must stay stable.
ConfigurationObject = Dict[str, Any]
Argv = List[str]
