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
"""FlyHelmet CLI — entry point."""

from __future__ import annotations

import click

from flyhelmet import __version__
from flyhelmet.cli.console import print_banner


class FlyHelmetCLI(click.Group):
    """Custom Click group that shows the FlyHelmet banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


@click.group(cls=FlyHelmetCLI)
@click.version_option(version=__version__, prog_name="flyhelmet")
def cli() -> None:
    """FlyHelmet — security header policy tooling."""


from flyhelmet.cli.headers import check_command, headers_command  # noqa: E402
from flyhelmet.cli.info import info_command  # noqa: E402

cli.add_command(headers_command, name="headers")
cli.add_command(check_command, name="check")
cli.add_command(info_command, name="info")
