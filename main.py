#!/usr/bin/env python3
"""Data Mapper - Entry point."""
import asyncio
import logging
import sys
from pathlib import Path

import click
from colorama import Fore, Style, init

from config import app_config
from datamapper.builder import DataMapper, MappingRuleApplier
from datamapper.exporter import JsonExporter
from datamapper.mapper import HeuristicMapper
from datamapper.parser import RuleLoader
from datamapper.transform import ModifierRegistry, TransformExecutor

# Initialize colorama
init(autoreset=True)


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Data Mapper{Fore.CYAN}                          ║")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Declarative Record Transformation{Fore.CYAN}    ║")
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    click.echo()


def build_mapper() -> DataMapper:
    """Wire a DataMapper from the application config."""
    registry = ModifierRegistry(default_locale=app_config.mapper.default_locale)
    executor = TransformExecutor(registry=registry)
    return DataMapper(MappingRuleApplier(executor=executor))


def fail(message: str):
    click.echo(f"{Fore.RED}❌ {message}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """Data Mapper - Apply declarative mapping rules to JSON records."""
    logging.basicConfig(
        level=app_config.mapper.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("rules_file", type=click.Path(exists=True))
@click.argument("records_file", type=click.Path(exists=True))
@click.option("--output", type=click.Path(), help="Write results to this JSON file")
@click.option("--strict", is_flag=True, help="Exit with code 1 if any rule failed")
@click.option("--timeout", type=float, default=None, help="Deadline in seconds for the whole run")
def apply(rules_file, records_file, output, strict, timeout):
    """Apply RULES_FILE to every record in RECORDS_FILE."""
    loader = RuleLoader()
    exporter = JsonExporter()

    try:
        rules = loader.load_rules(rules_file)
        records = loader.load_records(records_file)
    except (FileNotFoundError, ValueError) as e:
        fail(str(e))

    mapper = build_mapper()
    timeout = timeout if timeout is not None else app_config.mapper.batch_timeout

    try:
        outcomes = asyncio.run(
            asyncio.wait_for(mapper.apply_to_records(rules, records), timeout)
        )
    except asyncio.TimeoutError:
        fail(f"Mapping did not finish within {timeout} seconds")

    if output:
        print_banner()
        exporter.export(Path(output), rules, outcomes)
        click.echo(f"{Fore.GREEN}✅ Mapped {len(outcomes)} records to {output}")
    else:
        click.echo(exporter.dumps([outcome.to_dict() for outcome in outcomes]))

    failed = 0
    for index, outcome in enumerate(outcomes):
        if outcome.ok:
            continue
        failed += 1
        for error in outcome.errors:
            click.echo(f"{Fore.YELLOW}⚠️  Record {index}: {error}", err=True)

    if strict and failed:
        fail(f"{failed} of {len(outcomes)} records had errors")


@cli.command()
@click.argument("source_fields_file", type=click.Path(exists=True))
@click.argument("destination_fields_file", type=click.Path(exists=True))
@click.option("--output", type=click.Path(), help="Write generated rules to this JSON file")
@click.option(
    "--fuzzy",
    type=click.FloatRange(0, 1),
    default=None,
    help="Also match names whose similarity ratio exceeds this threshold",
)
def automap(source_fields_file, destination_fields_file, output, fuzzy):
    """Generate direct mappings between fields with matching names."""
    loader = RuleLoader()
    exporter = JsonExporter()

    try:
        sources = loader.load_source_fields(source_fields_file)
        destinations = loader.load_destination_fields(destination_fields_file)
    except (FileNotFoundError, ValueError, KeyError) as e:
        fail(str(e))

    rules = HeuristicMapper(fuzzy_threshold=fuzzy).auto_generate_mappings(sources, destinations)
    document = {"rules": [rule.to_dict() for rule in rules]}

    if output:
        print_banner()
        output_file = Path(output)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(exporter.dumps(document), encoding="utf-8")
        click.echo(f"{Fore.GREEN}✅ Generated {len(rules)} mappings to {output}")
    else:
        click.echo(exporter.dumps(document))

    unmapped = len(destinations) - len(rules)
    if unmapped:
        click.echo(f"{Fore.YELLOW}{unmapped} destination fields left unmapped", err=True)


@cli.command()
def modifiers():
    """List available modifiers."""
    print_banner()

    click.echo(f"{Fore.YELLOW}Available modifiers")
    click.echo(f"{Fore.YELLOW}{'=' * 30}")

    for name in ModifierRegistry().names():
        click.echo(f"  {name}")


if __name__ == "__main__":
    cli()
