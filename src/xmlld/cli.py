import logging
import sys

import click

from xmlld import (
    DEFAULT_BASE_NS,
    DEFAULT_DATATYPE_PROPERTY_PREFIX,
    DEFAULT_OBJECT_PROPERTY_PREFIX,
)
from xmlld.errors import XMLLDError
from xmlld.instance import write_instance_to_rdf
from xmlld.ontology import write_ontology_to_rdf

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"
LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


@click.group()
@click.option(
    "--log",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="warning",
    help="Logging level (default: warning)",
)
def cli(log: str):
    """Convert XML instance documents to RDF using a schema-derived OWL ontology."""
    logging.basicConfig(level=log.upper(), format=LOG_FORMAT)


@cli.group()
def convert():
    """Convert XML and ontology files to RDF formats."""
    pass


@convert.command()
@click.argument("instance_path")
@click.option(
    "--ontology",
    "-O",
    "ontology_path",
    required=True,
    help="Ontology derived from the instance's XML Schema.",
)
@click.option(
    "--output",
    "-o",
    default="instance.ttl",
    help="Output file path (default: instance.ttl)",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    default="turtle",
    help="RDF/XML, RDF/XML-ABBREV, N-TRIPLE, N3 or an rdflib format (default: turtle)",
)
@click.option(
    "--base-ns",
    default=DEFAULT_BASE_NS,
    help="Namespace of the generated resources, without '#'.",
)
@click.option("--namespace", default=None, help="Working namespace of the instance, with '#'.")
@click.option("--prefix", default=None, help="Prefix for the working namespace.")
@click.option(
    "--object-prefix",
    default=DEFAULT_OBJECT_PROPERTY_PREFIX,
    help="Prefix of object property names (default: has)",
)
@click.option(
    "--datatype-prefix",
    default=DEFAULT_DATATYPE_PROPERTY_PREFIX,
    help="Prefix of datatype property names (default: has)",
)
def instance(
    instance_path: str,
    ontology_path: str,
    output: str,
    output_format: str,
    base_ns: str,
    namespace: str,
    prefix: str,
    object_prefix: str,
    datatype_prefix: str,
):
    """
    Convert an XML instance document to RDF.

    INSTANCE_PATH: Path to the XML instance document.
    """
    try:
        write_instance_to_rdf(
            instance_path,
            ontology_path,
            output,
            format=output_format,
            base_ns=base_ns,
            namespace=namespace,
            prefix=prefix,
            object_property_prefix=object_prefix,
            datatype_property_prefix=datatype_prefix,
        )
        click.echo(f"Converted instance document to {output}")
    except (XMLLDError, ValueError, OSError) as e:
        click.echo(str(e))
        sys.exit(1)


@convert.command()
@click.argument("ontology_path")
@click.option(
    "--output",
    "-o",
    default="ontology.ttl",
    help="Output file path (default: ontology.ttl)",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    default="turtle",
    help="rdflib output format (default: turtle)",
)
def ontology(ontology_path: str, output: str, output_format: str):
    """
    Write an ontology document in another RDF syntax.

    ONTOLOGY_PATH: Path or URL to the ontology document.
    """
    try:
        write_ontology_to_rdf(ontology_path, output, format=output_format)
        click.echo(f"Converted ontology to {output}")
    except (XMLLDError, ValueError, OSError) as e:
        click.echo(str(e))
        sys.exit(1)
