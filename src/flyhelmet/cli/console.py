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
"""Shared Rich console for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

FLYHELMET_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "flyhelmet": "bold magenta",
    "dim": "dim",
})

console = Console(theme=FLYHELMET_THEME)


def print_banner() -> None:
    """Print the one-line FlyHelmet banner."""
    from flyhelmet import __version__

    console.print(f"[flyhelmet]FlyHelmet[/flyhelmet] [dim]v{__version__} :: security headers[/dim]")
    console.print("  [dim]Copyright 2026 Firefly Software Solutions Inc. | Apache 2.0 License[/dim]\n")


def headers_table(headers: dict[str, str], title: str = "Response headers") -> Table:
    """Render a header map as a two-column table."""
    table = Table(title=title, border_style="dim")
    table.add_column("Header", style="info", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for name, value in headers.items():
        table.add_row(name, escape(value))
    return table
