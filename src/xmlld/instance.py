from pathlib import Path
from typing import Optional, Union

from rdflib import Graph

from xmlld import (
    DEFAULT_BASE_NS,
    DEFAULT_DATATYPE_PROPERTY_PREFIX,
    DEFAULT_OBJECT_PROPERTY_PREFIX,
)
from xmlld.converter import DocumentSource, XMLToRDFMapper
from xmlld.ontology import OntologyModel


def build_mapper(
    file: DocumentSource,
    ontology: Union[OntologyModel, str, Path],
    base_ns: str = DEFAULT_BASE_NS,
    namespace: Optional[str] = None,
    prefix: Optional[str] = None,
    object_property_prefix: str = DEFAULT_OBJECT_PROPERTY_PREFIX,
    datatype_property_prefix: str = DEFAULT_DATATYPE_PROPERTY_PREFIX,
) -> XMLToRDFMapper:
    if not isinstance(ontology, OntologyModel):
        ontology = OntologyModel.from_file(
            ontology,
            object_property_prefix=object_property_prefix,
            datatype_property_prefix=datatype_property_prefix,
        )
    return XMLToRDFMapper(
        file, ontology, base_ns=base_ns, namespace=namespace, prefix=prefix
    )


def convert_instance(
    file: DocumentSource, ontology: Union[OntologyModel, str, Path], **options
) -> Graph:
    """
    Convert an XML instance document to RDF and return a Graph.

    :param file: Path to the XML instance document.
    :param ontology: The ontology derived from the document's schema, or a path to it.
    :param options: base_ns, namespace, prefix, object_property_prefix and
        datatype_property_prefix.
    :return: A Graph containing the RDF representation of the instance.
    """
    return build_mapper(file, ontology, **options).convert()


def write_instance_to_rdf(
    file: DocumentSource,
    ontology: Union[OntologyModel, str, Path],
    destination: str,
    format: str = "turtle",
    **options,
):
    """
    Convert an XML instance document and write the RDF Graph to a file.
    """
    mapper = build_mapper(file, ontology, **options)
    mapper.convert()
    mapper.write_model(destination, format=format)
