#!/usr/bin/env python3

import click

from qtpods.config import load_config, setup_logging
from qtpods.commands.install import install_handler
from qtpods.commands.remove import remove_handler
from qtpods.commands.update import update_handler
from qtpods.commands.list import list_handler, available_handler
from qtpods.commands.generate import generate_handler
from qtpods.commands.check import check_handler
from qtpods.commands.init import init_handler


@click.group()
@click.version_option(package_name='qtpods')
@click.option('--repo', '-C', default='.', show_default=True,
              type=click.Path(file_okay=False),
              help='Repository to operate on')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, repo, verbose):
    """qtpods - Manage qmake pods as git submodules.

    Installs, removes and updates third-party pods in a repository and
    keeps pods.pri, pods-subdirs.pri and the subdirs project file in
    step with the installed submodules.
    """
    obj = ctx.ensure_object(dict)
    if obj.get('config') is None:
        obj['config'] = load_config()
    obj['repo'] = repo
    setup_logging(level='DEBUG' if verbose else None, config=obj['config'])


# Pod lifecycle
cli.add_command(install_handler)
cli.add_command(remove_handler)
cli.add_command(update_handler)

# Listing
cli.add_command(list_handler)
cli.add_command(available_handler)

# Project files
cli.add_command(generate_handler)
cli.add_command(check_handler)
cli.add_command(init_handler)


def main():
    cli()

if __name__ == "__main__":
    main()
