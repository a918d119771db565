"""
Check command for qtpods.
"""

import json

import click

from ..cli_utils import get_repository, get_service, handle_errors, pretty_option
from ..exit_codes import INVALID_POD
from ..output import console


@click.command('check')
@click.argument('names', nargs=-1, required=True, metavar='NAME...')
@pretty_option
@click.pass_context
@handle_errors
def check_handler(ctx, names, pretty):
    """Check pods against the pod layout.

    A valid pod has an all-lowercase name and a directory holding
    LICENSE, README.md, NAME.pri and NAME.pro. Exits non-zero if any
    pod is invalid.

    \b
    Examples:
        qtpods check qt-json
        qtpods check qt-json qt-logger --pretty
    """
    service = get_service(ctx)
    repository = get_repository(ctx)

    all_valid = True
    for name in names:
        problems = service.validator.problems(repository, name)
        valid = service.check_pod(repository, name)
        all_valid = all_valid and valid

        if pretty:
            if valid:
                console.print(f"[green]✓[/green] {name}")
            else:
                console.print(f"[red]✗[/red] {name}: {', '.join(problems)}")
        else:
            print(json.dumps({'name': name, 'valid': valid, 'problems': problems}), flush=True)

    if not all_valid:
        raise SystemExit(INVALID_POD)
