import logging
import os
import sys
import typing

import click

from . import __doc__, __version__, handlers, logs
from .age import Age
from .keys import KeyResolver

log = logging.getLogger(__name__)

COMMANDS = {
    'encrypt': 'encrypt',
    '--encrypt': 'encrypt',
    'decrypt': 'decrypt',
    '--decrypt': 'decrypt',
    'key-provider': 'key-provider',
    '--key-provider': 'key-provider',
    'key': 'key-provider',
    '--key': 'key-provider',
    'version': 'version',
    '--version': 'version',
    '-v': 'version',
}

USAGE = """Usage:
  {prog} <encrypt|decrypt|key-provider> [options]
  {prog} --encrypt [options]
  {prog} --decrypt [options]
  {prog} --key-provider [options]
  {prog} --key [options]
  {prog} --help
  {prog} -h"""


def version() -> str:
    return f"Version {__version__}"


@click.command(
    help=__doc__,
    context_settings={
        'ignore_unknown_options': True,
        'help_option_names': ['-h', '--help'],
    })
@click.argument('command', required=False, type=click.UNPROCESSED)
@click.argument('options', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def main(
        ctx: click.Context,
        command: typing.Optional[str],
        options: typing.Sequence[str]):
    logs.configure(os.environ)
    log.debug(f"Command: {command} {' '.join(options)}")

    stdin = sys.stdin
    stdout = sys.stdout
    age = Age()

    selected = COMMANDS.get(command or '')
    if selected == 'encrypt':
        handlers.encrypt(stdin, stdout, resolver=KeyResolver(age=age), age=age)
    elif selected == 'decrypt':
        handlers.decrypt(stdin, stdout, age=age)
    elif selected == 'key-provider':
        handlers.key_provider(stdin, stdout, resolver=KeyResolver(age=age))
    elif selected == 'version':
        click.echo(version())
    else:
        click.echo(version())
        click.echo(USAGE.format(prog=ctx.find_root().info_name))
