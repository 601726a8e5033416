"""
Environment variable loading utility

Variables are read in layers, later layers overriding earlier ones:
1. the process environment
2. .env next to the project root (never overrides the process environment)
3. .env.test or .env.prod, picked by RUN_ENV (overrides both)
"""
import os
from pathlib import Path
from typing import Optional

import environ

ENV_FILE = ".env"
RUN_ENV_FILES = {
    "test": ".env.test",
    "prod": ".env.prod",
}


def get_run_env() -> str:
    """
    Get the running environment name, lower-cased, empty when unset
    """
    return os.environ.get("RUN_ENV", "").strip().lower()


def load_env(base_dir: Path, run_env: Optional[str] = None) -> environ.Env:
    """
    Load environment variables with layered support

    Args:
        base_dir: Directory holding the .env files
        run_env: Environment name, defaults to RUN_ENV

    Returns:
        environ.Env instance reading the merged environment
    """
    env_file = base_dir / ENV_FILE
    if env_file.exists():
        environ.Env.read_env(env_file)

    run_env = get_run_env() if run_env is None else run_env
    layer_name = RUN_ENV_FILES.get(run_env)
    if layer_name:
        layer_file = base_dir / layer_name
        if layer_file.exists():
            environ.Env.read_env(layer_file, overwrite=True)

    return environ.Env()
