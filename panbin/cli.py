#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for panbin.

This module provides the main CLI entry point and all subcommands for
binning path information of pangenome variation graphs.
"""

import sys
import click
from pathlib import Path
import yaml

from .version import __version__
from .config.schema import load_config, save_config_template, validate_config, TEMPLATES


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose (debug) logging')
@click.option('--quiet', '-q', is_flag=True, help='Only log errors')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    panbin: path binning for pangenome variation graphs

    Projects every path of a GFA variation graph onto a linear grid of bins
    and reports per-bin coverage, inversion and position statistics plus the
    links between bins each path makes.
    """
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


def _log_level(ctx, configured: str) -> str:
    obj = ctx.obj or {}
    if obj.get('VERBOSE'):
        return 'DEBUG'
    if obj.get('QUIET'):
        return 'ERROR'
    return configured or 'WARNING'


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='panbin_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t', type=click.Choice(TEMPLATES), default='default',
              help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    try:
        save_config_template(Path(output), template=template)
        click.echo(f"✓ Configuration file created: {output}")
    except (OSError, ValueError) as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    try:
        cfg = load_config(Path(config_file))
    except (OSError, yaml.YAMLError) as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    errors = validate_config(cfg)
    if errors:
        click.echo("✗ Configuration validation failed:", err=True)
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', 'fmt', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, fmt):
    """Display configuration settings."""
    try:
        cfg = load_config(Path(config_file))
    except (OSError, yaml.YAMLError) as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    if fmt == 'yaml':
        click.echo(yaml.dump(cfg, default_flow_style=False, sort_keys=False))
        return

    binning = cfg['binning']
    output = cfg['output']
    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)
    click.echo("\nBinning:")
    click.echo(f"  Bin width: {binning['bin_width'] or 'derived from bin count'}")
    click.echo(f"  Bin count: {binning['num_bins'] or 'derived from bin width'}")
    click.echo(f"  Bin sequences: {'yes' if binning['emit_sequences'] else 'no'}")
    click.echo(f"  Workers: {binning['workers']}")
    click.echo("\nOutput:")
    click.echo(f"  Format: {output['format']}")
    click.echo(f"  Name delimiter: {output['name_delimiter'] or 'none'}")
    click.echo(f"  Aggregate by delimiter: {output['aggregate_by_delimiter']}")


# ============================================================================
# Binning Commands
# ============================================================================

@main.command('bin')
@click.option('--idx', '-i', 'graph_file', required=True,
              type=click.Path(exists=True, dir_okay=False, allow_dash=True),
              help='Input graph in GFA v1 format ("-" for stdin)')
@click.option('--out', '-o', 'output', type=click.Path(dir_okay=False, allow_dash=True),
              default='-', help='Write records to this file (default: stdout)')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True),
              help='Configuration file (YAML); command-line options take precedence')
@click.option('--num-bins', '-n', type=click.IntRange(min=0), default=None,
              help='Number of bins')
@click.option('--bin-width', '-w', type=click.IntRange(min=0), default=None,
              help='Width of each bin in basepairs along the graph vector')
@click.option('--json', '-j', 'output_json', is_flag=True,
              help='Write newline-delimited JSON including bin sequences and links')
@click.option('--no-seqs', '-s', is_flag=True,
              help="Don't write out the sequence of each bin")
@click.option('--path-delim', '-D', default=None,
              help='Annotate rows by prefix and suffix of this delimiter')
@click.option('--aggregate-delim', '-a', is_flag=True,
              help='Aggregate paths on the path prefix delimiter')
@click.option('--threads', '-t', type=click.IntRange(min=1), default=None,
              help='Number of threads used to bin paths')
@click.option('--log-file', type=click.Path(dir_okay=False), default=None,
              help='Also write log messages to this file')
@click.pass_context
def bin_command(ctx, graph_file, output, config_file, num_bins, bin_width, output_json,
                no_seqs, path_delim, aggregate_delim, threads, log_file):
    """
    Bin path information across the graph.

    Examples:
        # 1 kbp bins, tab-separated rows on stdout
        panbin bin -i graph.gfa -w 1000

        # 100 bins, JSON records with PanSN prefix/suffix annotation
        panbin bin -i graph.gfa -n 100 -j -D '#' -o bins.json
    """
    from .config import ConfigParser, ConfigValidationError
    from .utils import configure_logging

    try:
        cfg = ConfigParser(config_file)
    except (OSError, ConfigValidationError) as e:
        click.echo(f"[panbin bin] error: {e}", err=True)
        sys.exit(1)

    cfg.merge_cli_overrides({
        'binning.num_bins': num_bins,
        'binning.bin_width': bin_width,
        'binning.emit_sequences': False if no_seqs else None,
        'binning.workers': threads,
        'output.format': 'json' if output_json else None,
        'output.name_delimiter': path_delim,
        'output.aggregate_by_delimiter': True if aggregate_delim else None,
        'logging.log_file': log_file,
    })

    log_cfg = cfg.get_logging_config()
    logger = configure_logging(_log_level(ctx, log_cfg.get('level')), log_cfg.get('log_file'))

    errors = validate_config(cfg.to_dict())
    if errors:
        for error in errors:
            click.echo(f"[panbin bin] error: {error}", err=True)
        sys.exit(1)

    options = cfg.to_binning_options()
    if options.aggregate_by_delimiter and not options.name_delimiter:
        logger.warning("--aggregate-delim has no effect without --path-delim")

    from .errors import PanbinError
    from .io_utils import load_graph_from_gfa
    from .binning import BinningEngine, make_sink

    try:
        graph = load_graph_from_gfa(graph_file)
        engine = BinningEngine(graph, options)
    except (PanbinError, OSError) as e:
        click.echo(f"[panbin bin] error: {e}", err=True)
        sys.exit(1)

    with click.open_file(output, 'w') as out:
        sink = make_sink(cfg.get('output.format'), out,
                         name_delimiter=options.name_delimiter,
                         aggregate_by_delimiter=options.aggregate_by_delimiter)
        try:
            summary = engine.run(sink)
        except PanbinError as e:
            click.echo(f"[panbin bin] error: {e}", err=True)
            sys.exit(1)

    logger.info(f"{summary.paths} paths written to {output}")


@main.command()
@click.argument('graph_file', type=click.Path(exists=True, dir_okay=False, allow_dash=True))
def stats(graph_file):
    """Show segment, link and path counts of a GFA graph."""
    from .errors import PanbinError
    from .io_utils import gfa_stats

    try:
        counts = gfa_stats(graph_file)
    except (PanbinError, OSError) as e:
        click.echo(f"✗ Error reading graph: {e}", err=True)
        sys.exit(1)

    click.echo(f"segments\t{counts['segments']}")
    click.echo(f"links\t{counts['links']}")
    click.echo(f"paths\t{counts['paths']}")
    click.echo(f"length\t{counts['total_length']}")


@main.command()
@click.option('--idx', '-i', 'graph_file', required=True,
              type=click.Path(exists=True, dir_okay=False, allow_dash=True),
              help='Input graph in GFA v1 format')
@click.option('--out', '-o', 'output', type=click.Path(dir_okay=False, allow_dash=True),
              default='-', help='Output GFA (default: stdout)')
def view(graph_file, output):
    """Re-write a graph as GFA v1 with dense numeric segment ids."""
    from .errors import PanbinError
    from .io_utils import load_graph_from_gfa, write_gfa

    try:
        graph = load_graph_from_gfa(graph_file)
    except (PanbinError, OSError) as e:
        click.echo(f"✗ Error reading graph: {e}", err=True)
        sys.exit(1)

    with click.open_file(output, 'w') as out:
        write_gfa(graph, out)


# ============================================================================
# Utility Commands
# ============================================================================

@main.command()
def version():
    """Show version information."""
    click.echo(f"panbin v{__version__}")
    click.echo("\nDependencies:")

    from importlib import metadata

    for label, dist in [('NumPy', 'numpy'), ('PyYAML', 'PyYAML'), ('Click', 'click')]:
        try:
            click.echo(f"  {label}: {metadata.version(dist)}")
        except metadata.PackageNotFoundError:
            click.echo(f"  {label}: not installed")


if __name__ == '__main__':
    sys.exit(main())
