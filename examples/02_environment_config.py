"""
Environment Configuration Examples.

Demonstrates loading ClientConfig from .env files, environment variables
and YAML config files.
"""

import os
import tempfile
from pathlib import Path

from nova_client.core.env_config import (
    CONFIG_FILE_ENV_VAR,
    ConfigFileLoader,
    ProfileConfig,
    load_from_env,
    print_config_summary,
)


def example_1_load_from_env_file(workdir: Path):
    """Example 1: Load from a profile .env file."""
    print("\n" + "=" * 60)
    print("EXAMPLE 1: Load from .env.development")
    print("=" * 60 + "\n")

    env_file = workdir / ".env.development"
    env_file.write_text(
        "NOVA_CLIENT_BASE_URL=http://localhost:8774/v2/tenant\n"
        "NOVA_CLIENT_AUTH_TOKEN=gAAAAB-demo-token\n"
        "NOVA_CLIENT_RETRY_MAX_ATTEMPTS=5\n"
        "NOVA_CLIENT_LOG_ENABLE_CONSOLE=true\n"
    )

    config = load_from_env(env_file=str(env_file))
    print_config_summary(config)


def example_2_overrides():
    """Example 2: Explicit overrides win over env."""
    print("\n" + "=" * 60)
    print("EXAMPLE 2: Overrides")
    print("=" * 60 + "\n")

    config = load_from_env(
        env_file=None,
        base_url="https://compute.example.com/v2/tenant",
        retry_max_attempts=2,
        retry_respect_retry_after=False,
    )
    print_config_summary(config)


def example_3_profile(workdir: Path):
    """Example 3: Named profile."""
    print("\n" + "=" * 60)
    print("EXAMPLE 3: ProfileConfig('staging')")
    print("=" * 60 + "\n")

    (workdir / ".env.staging").write_text("NOVA_CLIENT_TIMEOUT_READ=60\n")
    cwd = os.getcwd()
    os.chdir(workdir)
    try:
        profile = ProfileConfig("staging")
        print(profile)
        print(f"timeout_read: {profile.load().timeout_read}")
    finally:
        os.chdir(cwd)


def example_4_yaml(workdir: Path):
    """Example 4: YAML config file picked up via NOVA_CLIENT_CONFIG_FILE."""
    print("\n" + "=" * 60)
    print("EXAMPLE 4: YAML config file")
    print("=" * 60 + "\n")

    config_file = workdir / "nova.yaml"
    config_file.write_text(
        "nova_client:\n"
        "  base_url: https://compute.example.com/v2/tenant\n"
        "  headers:\n"
        "    X-Auth-Token: gAAAAB-yaml-token\n"
        "  timeout:\n"
        "    connect: 3\n"
        "    read: 20\n"
        "  retry:\n"
        "    max_attempts: 4\n"
        "    backoff_base: 0.5\n"
    )

    os.environ[CONFIG_FILE_ENV_VAR] = str(config_file)
    try:
        print_config_summary(ConfigFileLoader.from_env_path())
    finally:
        del os.environ[CONFIG_FILE_ENV_VAR]


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        workdir = Path(tmp)
        example_1_load_from_env_file(workdir)
        example_2_overrides()
        example_3_profile(workdir)
        example_4_yaml(workdir)
