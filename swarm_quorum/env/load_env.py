import os
from typing import Dict, TypeVar

from dotenv import dotenv_values
from pydantic import ValidationError

from swarm_quorum.errors import SetupError

from .env import Env, PrimaryType

T = TypeVar("T", bound=Env)


def load_env(default: type[T] = Env, env_file: str | None = None) -> T:
    """Build ``default`` from a ``.env`` file overlaid with the process environment."""
    if env_file is None:
        env_file = ".env"

    envars = default.types_map()

    raw_values: Dict[str, str] = {}
    if os.path.exists(env_file):
        raw_values.update(
            {
                envar_name: envar_value
                for envar_name, envar_value in dotenv_values(dotenv_path=env_file).items()
                if envar_name in envars and envar_value
            }
        )

    raw_values.update(
        {
            envar_name: envar_value
            for envar_name in envars
            if (envar_value := os.getenv(envar_name))
        }
    )

    try:
        values: Dict[str, PrimaryType] = {
            envar_name: envars[envar_name](envar_value)
            for envar_name, envar_value in raw_values.items()
        }

        return default(**values)

    except (ValueError, ValidationError) as err:
        raise SetupError(
            "Invalid configuration",
            cause=err,
            env_file=env_file,
        ) from err
