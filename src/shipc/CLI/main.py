"""
Command Line Interface for shipc.
"""
import click
from .. import __version__
from ..errors import ShipcError
from ..MANAGERS.run_orchestrator import RunOrchestrator
from ..MODELS.run_request import RunRequest, Volume
from ..MODELS.tool_config import ToolConfig

# -1 as seen by the parent process
FAILURE_EXIT_CODE = 255


def parse_volumes(ctx, param, values):
    """Validate each ORIGIN:DESTINATION value before anything is staged."""
    volumes = []
    for value in values:
        try:
            volumes.append(Volume.parse(value))
        except ValueError as e:
            raise click.BadParameter(f"{value!r}: {e}")
    return tuple(volumes)


def report_error(error: ShipcError):
    click.echo(f"error: {error.message}", err=True)
    if error.secondary:
        click.echo(f"error: {error.secondary}", err=True)
    if error.show_hint:
        click.echo("error: Run with --help for usage", err=True)


@click.group()
@click.version_option(__version__, prog_name="shipc")
@click.option('--env-file', default='.env', show_default=True,
              help='Optional file with SHIPC_* tool settings')
@click.pass_context
def cli(ctx, env_file):
    """
    shipc - Unpack and run oci images.

    Stages an OCI image into a runtime bundle and runs it with runc.
    """
    ctx.ensure_object(dict)
    ctx.obj['tools'] = ToolConfig.from_env(env_file)


@cli.command()
@click.argument('image')
@click.option('--rootless', is_flag=True, help='Run in rootless mode')
@click.option('--volume', '-v', 'volumes', multiple=True, metavar='ORIGIN:DESTINATION',
              callback=parse_volumes, help='Bind a host path into the container')
@click.option('--test', 'test_mode', is_flag=True, hidden=True)
@click.pass_context
def run(ctx, image, rootless, volumes, test_mode):
    """Run an oci image (a directory or a .tar.gz archive)."""
    request = RunRequest(image=image, rootless=rootless, volumes=volumes, test_mode=test_mode)
    orchestrator = RunOrchestrator(ctx.obj['tools'])

    try:
        exit_code = orchestrator.run(request)
    except ShipcError as e:
        report_error(e)
        ctx.exit(FAILURE_EXIT_CODE)

    ctx.exit(FAILURE_EXIT_CODE if exit_code is None else exit_code)


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
