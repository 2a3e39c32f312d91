"""
Read-only view over a schema-derived OWL ontology.

The mapper never builds or validates the ontology. It only needs class
lookup, direct superclass enumeration, inspection of ``owl:allValuesFrom``
restrictions, property classification and the set of classes that allow
mixed content. This module provides exactly that on top of an rdflib graph.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

from rdflib import BNode, Graph, URIRef
from rdflib.namespace import OWL, RDF, RDFS
from rdflib.term import Node
from rdflib.util import guess_format

from xmlld import (
    DEFAULT_DATATYPE_PROPERTY_PREFIX,
    DEFAULT_OBJECT_PROPERTY_PREFIX,
    MIXED_CONTENT_PROPERTY_NAME,
)
from xmlld.errors import OntologyLoadError, RestrictionError
from xmlld.naming import create_property_name, local_name

logger = logging.getLogger(__name__)

# Meta-types in order of preference when a resource declares several.
CLASS_KINDS = (OWL.Class, RDFS.Datatype, RDFS.Class)

OUTPUT_FORMATS = {
    "RDF/XML": "xml",
    "RDF/XML-ABBREV": "pretty-xml",
    "N-TRIPLE": "nt",
    "N-TRIPLES": "nt",
    "N3": "n3",
    "TURTLE": "turtle",
}


def rdf_format(format: str) -> str:
    """Translate a format name such as ``RDF/XML-ABBREV`` to its rdflib name."""
    return OUTPUT_FORMATS.get(format.upper(), format)


@dataclass(frozen=True)
class OntologyClass:
    """A named class of the ontology together with its declared meta-type."""

    identifier: URIRef
    kind: URIRef

    @property
    def local_name(self) -> str:
        return local_name(self.identifier)


class RestrictionNode:
    """
    A superclass edge of the form ``[ a owl:Restriction ; owl:onProperty P ;
    owl:allValuesFrom R ]``.

    Accessors raise :class:`RestrictionError` when the node does not have
    that shape, so callers can skip a single broken edge.
    """

    def __init__(self, graph: Graph, node: Node) -> None:
        self.graph = graph
        self.node = node

    def __repr__(self) -> str:
        return f"RestrictionNode({self.node!r})"

    def _single(self, predicate: URIRef) -> Node:
        values = list(self.graph.objects(self.node, predicate))
        if len(values) != 1:
            raise RestrictionError(
                f"Restriction {self.node} has {len(values)} values for {predicate}"
            )
        return values[0]

    @property
    def is_all_values_from(self) -> bool:
        return (self.node, OWL.allValuesFrom, None) in self.graph

    def on_property(self) -> URIRef:
        prop = self._single(OWL.onProperty)
        if not isinstance(prop, URIRef):
            raise RestrictionError(f"Restriction {self.node} is on an anonymous property")
        return prop

    def property_local_name(self) -> str:
        return local_name(self.on_property())

    def property_is_datatype(self) -> bool:
        return (self.on_property(), RDF.type, OWL.DatatypeProperty) in self.graph

    def property_is_object(self) -> bool:
        return (self.on_property(), RDF.type, OWL.ObjectProperty) in self.graph

    def range(self) -> URIRef:
        target = self._single(OWL.allValuesFrom)
        if not isinstance(target, URIRef):
            raise RestrictionError(
                f"Restriction {self.node} has an anonymous allValuesFrom range"
            )
        return target


class OntologyModel:
    """
    Wraps an rdflib graph holding the OWL ontology derived from an XML Schema.

    Args:
        graph: The ontology graph.
        object_property_prefix: Prefix used when naming object properties.
        datatype_property_prefix: Prefix used when naming datatype properties.
        mixed_classes: Identifiers of classes that allow mixed content. When
            omitted they are detected from restrictions on the mixed content
            property.
    """

    def __init__(
        self,
        graph: Graph,
        object_property_prefix: str = DEFAULT_OBJECT_PROPERTY_PREFIX,
        datatype_property_prefix: str = DEFAULT_DATATYPE_PROPERTY_PREFIX,
        mixed_classes: Optional[Iterable[Union[str, URIRef]]] = None,
    ) -> None:
        self.graph = graph
        self.object_property_prefix = object_property_prefix
        self.datatype_property_prefix = datatype_property_prefix
        if mixed_classes is None:
            self.mixed_classes = self._detect_mixed_classes()
        else:
            self.mixed_classes = {URIRef(str(c)) for c in mixed_classes}

    @classmethod
    def from_file(
        cls, path: Union[str, Path], format: Optional[str] = None, **kwargs
    ) -> "OntologyModel":
        """
        Parse an ontology document and wrap it.

        Args:
            path: Path or URL of the ontology document.
            format: rdflib parser name; guessed from the extension when omitted.
            **kwargs: Passed on to :class:`OntologyModel`.

        Raises:
            OntologyLoadError: If the document cannot be read or parsed.
        """
        source = str(path)
        graph = Graph(bind_namespaces="core")
        try:
            graph.parse(source, format=format or guess_format(source) or "xml")
        except Exception as e:
            raise OntologyLoadError(f"Failed to load ontology: {source}: {e}") from e
        logger.debug("Loaded %d ontology triples from %s", len(graph), source)
        return cls(graph, **kwargs)

    def get_class(self, identifier: Union[str, URIRef]) -> Optional[OntologyClass]:
        uri = URIRef(str(identifier))
        kinds = set(self.graph.objects(uri, RDF.type))
        for kind in CLASS_KINDS:
            if kind in kinds:
                return OntologyClass(uri, kind)
        return None

    def superclasses(
        self, cls: OntologyClass
    ) -> List[Union[OntologyClass, RestrictionNode]]:
        """
        Direct superclasses of ``cls`` in graph order.

        Anonymous superclasses that are not restrictions (unions, complements)
        are left out, as are named superclasses without a class declaration.
        """
        result: List[Union[OntologyClass, RestrictionNode]] = []
        for parent in self.graph.objects(cls.identifier, RDFS.subClassOf):
            if self._is_restriction(parent):
                result.append(RestrictionNode(self.graph, parent))
            elif isinstance(parent, URIRef):
                parent_class = self.get_class(parent)
                if parent_class is not None:
                    result.append(parent_class)
                else:
                    logger.debug("Superclass %s of %s is not declared", parent, cls.identifier)
        return result

    def is_enumeration(self, cls: OntologyClass) -> bool:
        return (cls.identifier, OWL.oneOf, None) in self.graph

    def is_mixed_class(self, identifier: Union[str, URIRef]) -> bool:
        return URIRef(str(identifier)) in self.mixed_classes

    def namespaces(self) -> Dict[str, URIRef]:
        return {prefix: URIRef(str(ns)) for prefix, ns in self.graph.namespaces()}

    def named_resources(self) -> Set[URIRef]:
        """Every IRI that is the subject of at least one ontology statement."""
        return {s for s in self.graph.subjects() if isinstance(s, URIRef)}

    def _is_restriction(self, node: Node) -> bool:
        return (node, RDF.type, OWL.Restriction) in self.graph or (
            isinstance(node, BNode) and (node, OWL.onProperty, None) in self.graph
        )

    def _detect_mixed_classes(self) -> Set[URIRef]:
        mixed_property = create_property_name(
            self.datatype_property_prefix, MIXED_CONTENT_PROPERTY_NAME
        )
        mixed = set()
        for restriction in self.graph.subjects(OWL.onProperty, None):
            prop = self.graph.value(restriction, OWL.onProperty)
            if isinstance(prop, URIRef) and local_name(prop) == mixed_property:
                for subject in self.graph.subjects(RDFS.subClassOf, restriction):
                    if isinstance(subject, URIRef):
                        mixed.add(subject)
        if mixed:
            logger.debug("Detected mixed content classes: %s", sorted(mixed))
        return mixed


def convert_ontology(file: Union[str, Path]) -> Graph:
    """
    Load an ontology document and return its graph.
    """
    return OntologyModel.from_file(file).graph


def write_ontology_to_rdf(
    file: Union[str, Path], destination: str, format: str = "turtle"
) -> None:
    """
    Load an ontology document and write it back out in another RDF syntax.
    """
    graph = convert_ontology(file)
    graph.serialize(destination, format=rdf_format(format))
