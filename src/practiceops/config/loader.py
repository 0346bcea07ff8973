import os
import re
import yaml
from pathlib import Path
from typing import Any, Dict

ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]+))?\}")

CONFIG_FILE_NAME = "practiceops.yaml"

ALLOWED_SECTIONS = {"practiceops", "server", "orchestration", "dependencies", "snapshots"}


def interpolate_env_vars(content: str) -> str:
    """Replace ${VAR} or ${VAR:default} with environment variables."""
    def replace_match(match: re.Match) -> str:
        var_name = match.group(1)
        default_value = match.group(2) if match.group(2) is not None else ""
        return os.environ.get(var_name, default_value)

    return ENV_VAR_PATTERN.sub(replace_match, content)


def load_config(path: Path) -> Dict[str, Any]:
    """
    Load practiceops.yaml with environment variable interpolation.

    Keeps only the known sections: practiceops, server, orchestration,
    dependencies, snapshots. A missing or unreadable file yields an empty
    dict so the lifecycle manager still boots on defaults.
    """
    if not path.exists():
        return {}

    try:
        content = path.read_text(encoding="utf-8")
        interpolated_content = interpolate_env_vars(content)
        full_config = yaml.safe_load(interpolated_content) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError):
        return {}

    if not isinstance(full_config, dict):
        return {}

    return {k: v for k, v in full_config.items() if k in ALLOWED_SECTIONS}
