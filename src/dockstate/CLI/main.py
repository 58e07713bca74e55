"""
Command Line Interface for dockstate.
"""
import json
import logging
import sys

import click

from ..exceptions import DockstateError
from ..MANAGERS.runtime_manager import RuntimeManager
from ..UTILS.config_loader import load_settings


def _manager(ctx) -> RuntimeManager:
    return ctx.obj['manager']


def _fail(error: Exception):
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group()
@click.option('--config', '-c', 'config_path', default=None, help='Settings YAML file')
@click.option('--verbose', '-v', is_flag=True, help='Log debug output')
@click.pass_context
def cli(ctx, config_path, verbose):
    """
    dockstate - inspect and converge container images on this host.

    Drives the container runtime CLI and reads its output back.
    """
    ctx.ensure_object(dict)
    try:
        settings = load_settings(config_path)
    except DockstateError as e:
        _fail(e)

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj['settings'] = settings
    if 'manager' not in ctx.obj:
        ctx.obj['manager'] = RuntimeManager.from_settings(settings)


@cli.command()
@click.pass_context
def images(ctx):
    """List images with their content digests."""
    try:
        records = _manager(ctx).list_images()
    except DockstateError as e:
        _fail(e)

    click.echo(f"{'REPOSITORY':30} {'TAG':12} {'DIGEST':72} {'IMAGE ID':72} SIZE")
    for image in records:
        click.echo(
            f"{image.repository:30} {image.tag:12} {image.content_digest:72} "
            f"{image.local_id:72} {image.size}"
        )


@cli.command()
@click.pass_context
def ps(ctx):
    """List all containers, stopped ones included."""
    try:
        records = _manager(ctx).list_containers()
    except DockstateError as e:
        _fail(e)

    click.echo(f"{'CONTAINER ID':15} {'IMAGE':40} {'STATUS':25} NAMES")
    click.echo("-" * 90)
    for container in records:
        click.echo(f"{container.id[:12]:15} {container.image:40} {container.status:25} {container.names}")


@cli.command()
@click.argument('container_id')
@click.pass_context
def inspect(ctx, container_id):
    """Print the detailed inspection of a container as JSON."""
    try:
        record = _manager(ctx).inspect_container(container_id)
    except DockstateError as e:
        _fail(e)
    click.echo(json.dumps(record, indent=2))


@cli.command()
@click.argument('container_id')
@click.pass_context
def digest(ctx, container_id):
    """Show the content digest of the image a container runs."""
    try:
        click.echo(_manager(ctx).get_container_image_digest(container_id))
    except DockstateError as e:
        _fail(e)


@cli.command()
@click.argument('image_digest')
@click.pass_context
def running(ctx, image_digest):
    """List containers running an image with this content digest."""
    try:
        records = _manager(ctx).get_containers_running_image(image_digest)
    except DockstateError as e:
        _fail(e)

    for container in records:
        click.echo(f"{container.id} {container.names}")


@cli.command()
@click.argument('reference')
@click.argument('image_digest')
@click.pass_context
def pull(ctx, reference, image_digest):
    """Pull REFERENCE pinned to IMAGE_DIGEST."""
    try:
        _manager(ctx).pull_image(reference, image_digest)
    except DockstateError as e:
        _fail(e)
    click.echo(f"Pulled {reference}@{image_digest}")


@cli.command(name='login-pull')
@click.argument('reference')
@click.option('--username', '-u', required=True, help='Registry user name')
@click.option('--registry', default=None, help='Registry host to log in to')
@click.password_option('--password', envvar='DOCKSTATE_REGISTRY_PASSWORD',
                       confirmation_prompt=False, help='Registry password or token')
@click.pass_context
def login_pull(ctx, reference, username, registry, password):
    """Log in to the registry, then pull REFERENCE."""
    try:
        _manager(ctx).pull_private_image(reference, username, password, registry=registry)
    except DockstateError as e:
        _fail(e)
    click.echo(f"Pulled {reference}")


@cli.command()
@click.option('--id', 'local_id', default=None, help='Local image id')
@click.option('--digest', 'image_digest', default=None, help='Content digest')
@click.pass_context
def rmi(ctx, local_id, image_digest):
    """Remove an image by local id or content digest."""
    if bool(local_id) == bool(image_digest):
        raise click.UsageError("Pass exactly one of --id or --digest.")

    try:
        if local_id:
            _manager(ctx).remove_image_by_local_id(local_id)
        else:
            _manager(ctx).remove_image_by_content_digest(image_digest)
    except DockstateError as e:
        _fail(e)
    click.echo("Image removed.")


@cli.command()
@click.argument('reference')
@click.argument('target')
@click.option('--previous', default=None, help='Content digest to remove once TARGET runs')
@click.option('--keep-previous', is_flag=True, help='Do not remove the previous image')
@click.pass_context
def converge(ctx, reference, target, previous, keep_previous):
    """Pull TARGET, confirm a container runs it, then remove the previous image."""
    try:
        result = _manager(ctx).converge(
            reference, target, previous_digest=previous, remove_previous=not keep_previous
        )
    except DockstateError as e:
        _fail(e)

    click.echo(f"{len(result.containers)} container(s) running {reference}@{target}")
    if result.removed_previous:
        click.echo(f"Removed {previous}")


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
