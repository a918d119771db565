"""
Init command for qtpods.
"""

import click

from ..cli_utils import get_repository, get_service, handle_errors, pretty_option, report


@click.command('init')
@click.argument('path', required=False, type=click.Path(file_okay=False))
@pretty_option
@click.pass_context
@handle_errors
def init_handler(ctx, path, pretty):
    """Create an empty pods project.

    Creates PATH (default: the --repo directory) if needed, runs
    git init unless it is already a repository, and writes pods.pri,
    pods-subdirs.pri and the subdirs project file.

    \b
    Examples:
        qtpods init myapp
        qtpods -C myapp init
    """
    service = get_service(ctx)
    result = service.create_project(path or get_repository(ctx))
    report(result, pretty)
