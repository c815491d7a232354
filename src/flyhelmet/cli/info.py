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
"""'flyhelmet info' — versions and the built-in default header set."""

from __future__ import annotations

import platform
from importlib.metadata import PackageNotFoundError, version

import click
from rich.table import Table

from flyhelmet import __version__
from flyhelmet.cli.console import console, headers_table
from flyhelmet.policy.builders import HSTS_HEADER_NAME, build_hsts
from flyhelmet.policy.resolver import DEFAULT_POLICY
from flyhelmet.web.security_headers import build_static_headers

_RUNTIME_PACKAGES = ("starlette", "structlog", "pyyaml")


def _installed(package: str) -> str:
    try:
        return version(package)
    except PackageNotFoundError:
        return "[dim]not installed[/dim]"


@click.command()
def info_command() -> None:
    """Show versions and the headers applied with no policy configured."""
    table = Table(title="Runtime", show_header=False, border_style="dim")
    table.add_column("Component", style="info")
    table.add_column("Version")
    table.add_row("flyhelmet", __version__)
    table.add_row("Python", platform.python_version())
    for package in _RUNTIME_PACKAGES:
        table.add_row(package, _installed(package))
    console.print(table)

    defaults = build_static_headers(DEFAULT_POLICY)
    if DEFAULT_POLICY.hsts is not None:
        defaults[HSTS_HEADER_NAME] = f"{build_hsts(DEFAULT_POLICY.hsts)} (production only)"
    console.print(headers_table(defaults, title="Default static headers"))
