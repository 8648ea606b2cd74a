"""Command-line interface for the XSD graph loader."""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click

from . import __version__
from .cache import SchemaCache
from .collector import collect_globals, new_pkg_bag
from .config import Config, LogLevel
from .exceptions import SchemaLoadError
from .fetcher import PROTOCOL_SEPARATOR
from .loader import SchemaLoader
from .logger import create_logger
from .resolver import find_type, global_element, global_substitution_elements
from .schema_model import Schema


def validate_uri(ctx, param, value):
    """Accept a URI, or a local file path which is turned into a file:// URI."""
    if value is None:
        return None

    if PROTOCOL_SEPARATOR in value:
        return value

    path = Path(value)
    if path.exists():
        if path.suffix.lower() not in {'.xsd', '.xml'}:
            raise click.BadParameter(f"Schema file must have .xsd or .xml extension: {value}")
        return path.resolve().as_uri()

    return value


def describe_graph(schema: Schema) -> Dict[str, Any]:
    return {
        "uri": schema.load_uri,
        "targetNamespace": schema.target_namespace,
        "includes": [describe_graph(included) for included in schema.included_schemas],
    }


def build_report(schema: Schema, find_type_name: Optional[str], find_element_name: Optional[str],
                 substitutes_name: Optional[str]) -> Dict[str, Any]:
    """Collect the globals of the graph and run the requested lookups."""
    bag = collect_globals(schema, new_pkg_bag(schema))
    report: Dict[str, Any] = {
        "root": schema.load_uri,
        "graph": describe_graph(schema),
        "schemas": len(schema.all_schemas()),
        "globals": bag.statistics(),
    }

    if find_type_name:
        found = find_type(schema, bag, find_type_name)
        report["type"] = None if found is None else {
            "name": found.name, "kind": type(found).__name__, "base": found.base,
        }

    if find_element_name:
        element = global_element(schema, bag, find_element_name)
        report["element"] = None if element is None else {
            "name": element.name, "type": element.type,
            "substitutionGroup": element.substitution_group,
        }

    if substitutes_name:
        head = global_element(schema, bag, substitutes_name)
        members = [] if head is None else global_substitution_elements(schema, head)
        report["substitutes"] = [member.name for member in members]

    return report


@click.command()
@click.version_option(__version__)
@click.option(
    "--uri", "-u",
    required=True,
    callback=validate_uri,
    help="URI or local path of the root XSD schema"
)
@click.option(
    "--local-copy",
    is_flag=True,
    help="Fetch each document once into the cache directory and read it from there"
)
@click.option(
    "--cache-dir",
    type=click.Path(path_type=Path),
    help="Local mirror directory (default: ./xsd-cache)"
)
@click.option(
    "--timeout",
    type=int,
    default=30,
    help="Fetch timeout in seconds"
)
@click.option(
    "--log-level",
    type=click.Choice([level.value for level in LogLevel], case_sensitive=False),
    default=LogLevel.WARN.value,
    help="Logging level"
)
@click.option("--find-type", "find_type_name", help="Resolve a global type name in the root schema context")
@click.option("--find-element", "find_element_name", help="Resolve a global element name in the root schema context")
@click.option("--substitutes", help="List the substitution group members of a global element")
@click.option(
    "--pretty/--compact",
    default=True,
    help="Pretty-print the JSON report (default: pretty)"
)
def main(
    uri: str,
    local_copy: bool,
    cache_dir: Optional[Path],
    timeout: int,
    log_level: str,
    find_type_name: Optional[str],
    find_element_name: Optional[str],
    substitutes: Optional[str],
    pretty: bool,
) -> None:
    """Load an XSD schema with its includes and imports and report the resolved graph.

    Examples:
        # Load a local schema
        xsdgraph --uri schema.xsd

        # Mirror remote documents locally and resolve a type
        xsdgraph --uri example.com/schemas/root.xsd --local-copy --find-type tns:Order
    """
    config = Config.from_cli_args(
        cache_dir=cache_dir,
        local_copy=local_copy,
        timeout=timeout,
        log_level=log_level.lower(),
    )

    logger = create_logger(level=config.logging.level, component="cli",
                           destination=config.logging.destination)

    errors = config.validate()
    if errors:
        logger.error("Configuration validation failed", errors=errors)
        for error in errors:
            click.echo(f"Error: {error}", err=True)
        sys.exit(1)

    logger.info("Loading schema graph", sourceURI=uri, localCopy=config.local_copy)

    try:
        schema = SchemaLoader(config, cache=SchemaCache()).load(uri)
        report = build_report(schema, find_type_name, find_element_name, substitutes)
    except SchemaLoadError as e:
        logger.error("Schema load failed", error=str(e), type=type(e).__name__)
        click.echo(f"✗ Failed to load schema: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warn("Load interrupted by user")
        click.echo("\nLoad interrupted by user", err=True)
        sys.exit(130)
    except Exception as e:
        logger.error("Unexpected error", error=str(e), type=type(e).__name__)
        click.echo(f"✗ Unexpected error: {e}", err=True)
        if config.logging.level == LogLevel.DEBUG:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    click.echo(json.dumps(report, indent=2 if pretty else None))


if __name__ == "__main__":
    main()
