"""
polygon_evolution/cli.py - Command-line interface
"""
import click
import dataclasses
import logging
import os
import random
import time

from .archive import EvolutionArchive
from .canvas import Canvas, ReferenceImage
from .chromosome import PolygonChromosome
from .config import ConfigurationError, EvolutionConfig
from .evaluator import FitnessEvaluator
from .population import Population

def _parse_size(value: str):
    try:
        width, height = (int(v) for v in value.lower().split('x'))
    except ValueError:
        raise click.BadParameter(f"expected WIDTHxHEIGHT, got {value!r}")
    if width < 1 or height < 1:
        raise click.BadParameter(f"size must be positive, got {value!r}")
    return width, height

@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def cli(verbose):
    """Polygon Evolution - approximate images with evolved translucent polygons"""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format='%(asctime)s %(name)s %(levelname)s %(message)s')

@cli.command()
@click.argument('target', type=click.Path(exists=True, dir_okay=False))
@click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False),
              help='JSON configuration file; command-line options override it')
@click.option('--generations', '-g', type=int, help='Number of generations to evolve')
@click.option('--population', '-p', 'population_size', type=int, help='Population size')
@click.option('--polygons', 'polygon_count', type=int, help='Polygons per chromosome')
@click.option('--vertices', 'vertex_count', type=int, help='Vertices per polygon')
@click.option('--mutation-rate', type=float, help='Per-field mutation probability (0.0-1.0)')
@click.option('--mutation-amount', type=float, help='Maximum mutation noise per field')
@click.option('--crossover-rate', type=float, help='Crossover probability (0.0-1.0)')
@click.option('--elitism-rate', type=float, help='Fraction of best individuals kept unchanged')
@click.option('--tournament-size', type=int, help='Tournament selection arity')
@click.option('--supersample', type=int, help='Anti-aliasing supersampling factor (1 disables)')
@click.option('--seed', type=int, help='Random seed for a reproducible run')
@click.option('--out', '-o', default='out/', help='Output directory')
@click.option('--workers', '-w', default=1, help='Threads used for fitness evaluation')
@click.option('--save-every', default=10, type=click.IntRange(min=1),
              help='Archive and render the best candidate every N generations')
def evolve(target, config_file, out, workers, save_every, **options):
    """Evolve polygons approximating the TARGET image"""
    overrides = {k: v for k, v in options.items() if v is not None}
    try:
        base = EvolutionConfig.from_file(config_file) if config_file else EvolutionConfig()
        config = dataclasses.replace(base, **overrides).validate()
        reference = ReferenceImage.open(target)
        evaluator = FitnessEvaluator(reference, supersample=config.supersample)
    except (ConfigurationError, ValueError, OSError) as e:
        raise click.ClickException(str(e))

    os.makedirs(out, exist_ok=True)
    archive = EvolutionArchive(os.path.join(out, 'archive'))
    rng = random.Random(config.seed)

    click.echo(f"Target: {target} ({reference.width}x{reference.height})")
    click.echo(f"Evolving {config.generations} generations, population {config.population_size}, "
               f"{config.polygon_count} polygons x {config.vertex_count} vertices")

    pop = Population(config, rng)
    start_time = time.time()

    for gen in range(config.generations):
        gen_start_time = time.time()
        last = gen == config.generations - 1

        pop.evaluate(evaluator, workers=workers)
        stats = pop.get_stats()

        if gen % save_every == 0 or last:
            archive.archive_generation(pop, gen, stats)
            render_file = os.path.join(archive.dirs['renders'], f"gen_{gen:04d}.png")
            evaluator.render_image(pop.best, filename=render_file)

        if gen % 10 == 0 or last:
            fitness_stats = stats['fitness']
            click.echo(f"Gen {gen:4d}/{config.generations}: "
                       f"Best={fitness_stats['max']:.6f} "
                       f"Avg={fitness_stats['mean']:.6f} "
                       f"BestEver={pop.best_fitness:.6f} "
                       f"Time={time.time() - gen_start_time:.2f}s")

        if not last:
            pop.evolve_generation()

    total_time = time.time() - start_time
    click.echo(f"\nEvolution completed in {total_time:.1f}s ({total_time/60:.1f} min)")

    best_json = os.path.join(out, 'best.json')
    best_png = os.path.join(out, 'best.png')
    pop.best.to_json(best_json)
    evaluator.render_image(pop.best, filename=best_png)
    click.echo(f"Best fitness {pop.best_fitness:.6f} saved to {best_json} and {best_png}")

    archive.export_summary_report()

@cli.command()
@click.argument('genome', type=click.Path(exists=True, dir_okay=False))
@click.option('--size', default='256x256', help='Output size as WIDTHxHEIGHT')
@click.option('--supersample', default=2, help='Anti-aliasing supersampling factor')
@click.option('--out', '-o', help='Output filename (optional)')
def render(genome, size, supersample, out):
    """Render a chromosome from a JSON file"""
    width, height = _parse_size(size)
    try:
        chromosome = PolygonChromosome.from_json(filename=genome)
        canvas = Canvas(width, height, supersample)
    except (ValueError, OSError) as e:
        raise click.ClickException(f"Error loading genome: {e}")

    if not out:
        base_name = os.path.splitext(os.path.basename(genome))[0]
        out = f"{base_name}_{width}x{height}.png"

    chromosome.draw(canvas)
    canvas.image.convert('RGB').save(out)
    click.echo(f"Image saved: {out}")

@cli.command()
@click.argument('genome', type=click.Path(exists=True, dir_okay=False))
@click.argument('target', type=click.Path(exists=True, dir_okay=False))
@click.option('--supersample', default=2, help='Anti-aliasing supersampling factor')
def score(genome, target, supersample):
    """Print the fitness of a chromosome against the TARGET image"""
    try:
        chromosome = PolygonChromosome.from_json(filename=genome)
        evaluator = FitnessEvaluator(ReferenceImage.open(target), supersample=supersample)
    except (ValueError, OSError) as e:
        raise click.ClickException(str(e))
    click.echo(f"{chromosome.fitness(evaluator):.6f}")

@cli.command()
@click.option('--archive', '-a', default='out/archive', type=click.Path(file_okay=False),
              help='Archive directory path')
def analyze(archive):
    """Analyze evolution results from archive"""
    if not EvolutionArchive.has_log(archive):
        raise click.ClickException(f"No evolution log found in {archive}")
    arch = EvolutionArchive(archive)
    arch.load_log()

    click.echo(arch.export_summary_report())

    stats = arch.get_archive_stats()
    click.echo(f"\nArchive Statistics:")
    click.echo(f"Total files: {stats['disk_files']}")
    click.echo(f"Archive size: {stats['archive_size_mb']:.1f} MB")

    genome_files = arch.list_archived_genomes()
    if genome_files:
        click.echo(f"\nRecent genome files:")
        for file in genome_files[-10:]:
            click.echo(f"  {file}")

if __name__ == '__main__':
    cli()
