"""Click CLI commands for PlanetBuilder."""

import logging
import math

import click

from .builder import PlanetBuilder
from .errors import NoPickHit, PlanetBuilderError
from .models import NoiseMode, PlanetSettings, PropCategory
from .terrain import land_fraction

logger = logging.getLogger(__name__)


def generation_options(fn):
    """Shared planet-generation options."""
    options = [
        click.option('--resolution', '-r', default=64, show_default=True,
                     type=click.IntRange(min=1), help='Sphere stacks/slices'),
        click.option('--noise', 'noise_mode', default=NoiseMode.COHERENT.value,
                     show_default=True,
                     type=click.Choice([m.value for m in NoiseMode])),
        click.option('--displacement', '-d', default=0.45, show_default=True,
                     help='Height amplitude'),
        click.option('--sea-level', default=0.0, show_default=True,
                     help='Radial height of the water surface'),
        click.option('--trees', default=10, show_default=True,
                     type=click.IntRange(min=0)),
        click.option('--rocks', default=10, show_default=True,
                     type=click.IntRange(min=0)),
        click.option('--grass', default=10, show_default=True,
                     type=click.IntRange(min=0)),
        click.option('--clouds', default=5, show_default=True,
                     type=click.IntRange(min=0)),
        click.option('--seed', default=None, type=int,
                     help='Session seed for reproducible output'),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def _make_builder(resolution, noise_mode, displacement, sea_level,
                  trees, rocks, grass, clouds, seed) -> PlanetBuilder:
    settings = PlanetSettings(
        resolution=resolution,
        noise_mode=noise_mode,
        displacement=displacement,
        sea_level=sea_level,
        counts={
            PropCategory.TREE: trees,
            PropCategory.ROCK: rocks,
            PropCategory.GRASS: grass,
            PropCategory.CLOUD: clouds,
        },
    )
    return PlanetBuilder(settings=settings, seed=seed)


def _echo_summary(snapshot):
    info = snapshot.summary()
    click.echo(f"Planet v{info['version']}: {info['vertices']} vertices, "
               f"{info['triangles']} triangles")
    click.echo(f"Height range: [{info['height_min']:.3f}, "
               f"{info['height_max']:.3f}]")
    counts = ', '.join(f"{k}={v}" for k, v in info['instances'].items())
    click.echo(f"Props: {counts}")
    if info['exhausted']:
        click.echo(f"Ran out of dry land for: {', '.join(info['exhausted'])}")


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
def cli(verbose: bool):
    """PlanetBuilder CLI for generating procedural planets with props."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)


@cli.command()
@generation_options
@click.option('--output', '-o', default='planet.glb', help='Output GLB file path')
@click.option('--angle', default=0.0, help='Planet spin in radians')
def generate(output: str, angle: float, **kwargs):
    """Generate a planet and export it as GLB."""
    try:
        builder = _make_builder(**kwargs)
        path = builder.export_glb(output, angle=angle)
    except (PlanetBuilderError, ValueError) as e:
        logger.error(f"Error generating planet: {e}")
        raise click.ClickException(str(e))
    _echo_summary(builder.snapshot)
    click.echo(f"Wrote {path}")


@cli.command()
@generation_options
def info(**kwargs):
    """Print mesh statistics without exporting."""
    try:
        builder = _make_builder(**kwargs)
    except (PlanetBuilderError, ValueError) as e:
        raise click.ClickException(str(e))
    snapshot = builder.snapshot
    _echo_summary(snapshot)
    dry = land_fraction(snapshot.terrain, snapshot.settings.sea_level)
    click.echo(f"Land above sea level: {dry:.1%}")


@cli.command()
@generation_options
@click.option('--x', 'ndc_x', default=0.0, type=click.FloatRange(-1.0, 1.0),
              help='Normalized device X')
@click.option('--y', 'ndc_y', default=0.0, type=click.FloatRange(-1.0, 1.0),
              help='Normalized device Y')
@click.option('--aspect', default=1.0,
              type=click.FloatRange(min=0.0, min_open=True),
              help='Viewport width / height')
@click.option('--angle', default=0.0, help='Planet spin in radians')
@click.option('--category', default=PropCategory.TREE.value,
              type=click.Choice([c.value for c in PropCategory]))
@click.option('--output', '-o', default=None,
              help='Optional GLB path to export after placing')
def pick(ndc_x: float, ndc_y: float, aspect: float, angle: float,
         category: str, output, **kwargs):
    """Cast a camera ray through (x, y) and place one prop where it lands."""
    try:
        builder = _make_builder(**kwargs)
        hit, instance = builder.place_prop_at_ndc(ndc_x, ndc_y,
                                                  category=category,
                                                  angle=angle, aspect=aspect)
    except NoPickHit:
        click.echo(f"No hit at ({ndc_x:+.3f}, {ndc_y:+.3f})")
        return
    except (PlanetBuilderError, ValueError) as e:
        raise click.ClickException(str(e))

    x, y, z = instance.position
    click.echo(f"Hit triangle {hit.triangle} (vertices "
               f"{', '.join(str(i) for i in hit.vertex_indices)}) "
               f"at t={hit.t:.4f}")
    click.echo(f"Placed {category} at ({x:.4f}, {y:.4f}, {z:.4f}), "
               f"{math.degrees(angle):.1f} deg spin")
    if output:
        click.echo(f"Wrote {builder.export_glb(output, angle=angle)}")
