# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""'flyhelmet headers' and 'flyhelmet check' — preview and validate a policy file."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from rich.markup import escape

from flyhelmet.cli.console import console, headers_table
from flyhelmet.config.properties import mode_from_config, policy_from_config
from flyhelmet.core.config import Config
from flyhelmet.kernel.exceptions import ConfigValidationError
from flyhelmet.logging.structlog_adapter import configure_logging
from flyhelmet.policy.types import Mode
from flyhelmet.web.security_headers import SecurityHeaders

NONCE_PLACEHOLDER = "<nonce>"

_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default="flyhelmet.yaml",
    show_default=True,
    help="YAML or TOML file with a flyhelmet.security section.",
)
_profile_option = click.option(
    "--profile",
    "profiles",
    multiple=True,
    help="Profile overlay to merge, e.g. --profile prod for flyhelmet-prod.yaml.",
)


def _load(config_path: Path, profiles: tuple[str, ...], quiet: bool = False) -> Config:
    if not config_path.is_file() and not quiet:
        console.print(f"[warning]![/warning] {config_path} not found, using built-in defaults")
    config = Config.from_file(config_path, list(profiles))
    configure_logging(config)
    logging.getLogger().setLevel(logging.WARNING)
    return config


def _report_invalid(exc: ConfigValidationError) -> None:
    console.print(f"[error]✗ Invalid policy[/error] [dim]({exc.code}, {escape(exc.field)})[/dim]")
    console.print(f"  {escape(str(exc))}")


@click.command()
@_config_option
@_profile_option
@click.option(
    "--mode",
    type=click.Choice([m.value for m in Mode]),
    default=None,
    help="Override flyhelmet.mode / FLYHELMET_MODE.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the headers as a JSON object.")
def headers_command(
    config_path: Path, profiles: tuple[str, ...], mode: str | None, as_json: bool
) -> None:
    """Show the security headers a response would receive."""
    config = _load(config_path, profiles, quiet=as_json)
    try:
        helmet = SecurityHeaders(
            policy_from_config(config),
            mode=mode or mode_from_config(config),
            nonce_generator=lambda: NONCE_PLACEHOLDER,
        )
    except ConfigValidationError as exc:
        _report_invalid(exc)
        raise SystemExit(1) from None

    headers = dict(helmet.compose().headers)
    if as_json:
        click.echo(json.dumps(headers, indent=2))
        return
    console.print(headers_table(headers, title=f"Response headers ({helmet.mode.value})"))


@click.command()
@_config_option
@_profile_option
def check_command(config_path: Path, profiles: tuple[str, ...]) -> None:
    """Validate a policy file."""
    config = _load(config_path, profiles)
    try:
        policy_from_config(config)
        mode = mode_from_config(config)
    except ConfigValidationError as exc:
        _report_invalid(exc)
        raise SystemExit(1) from None

    sources = ", ".join(config.loaded_sources) or "built-in defaults"
    console.print(f"[success]✓[/success] Policy is valid [dim](mode: {mode.value}; {sources})[/dim]")
