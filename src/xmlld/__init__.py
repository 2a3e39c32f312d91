"""Convert XML instance documents to RDF guided by a schema-derived OWL ontology."""

import logging

NAMESPACES = {
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "owl": "http://www.w3.org/2002/07/owl#",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
    "xsi": "http://www.w3.org/2001/XMLSchema-instance",
}

DEFAULT_BASE_NS = "http://www.example.org/example"
INSTANCE_NAME_PREFIX = "INS_"
DEFAULT_OBJECT_PROPERTY_PREFIX = "has"
DEFAULT_DATATYPE_PROPERTY_PREFIX = "has"
MIXED_CONTENT_PROPERTY_NAME = "textContent"
DATATYPE_SUFFIX = "Datatype"

NOT_ABSOLUTE_NS = "http://uri-not-absolute.com#"
NOT_VALID_NS = "http://uri-not-valid.com#"
FALLBACK_PREFIX = "NS"

from xmlld.errors import (  # noqa: E402
    DocumentParseError,
    MappingError,
    OntologyLoadError,
    XMLLDError,
)
from xmlld.ontology import OntologyModel, write_ontology_to_rdf  # noqa: E402
from xmlld.converter import XMLToRDFMapper  # noqa: E402
from xmlld.instance import convert_instance, write_instance_to_rdf  # noqa: E402

__all__ = [
    "NAMESPACES",
    "OntologyModel",
    "XMLToRDFMapper",
    "convert_instance",
    "write_instance_to_rdf",
    "write_ontology_to_rdf",
    "XMLLDError",
    "DocumentParseError",
    "OntologyLoadError",
    "MappingError",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
