"""
Resolution of XML element and attribute names to ontology properties.

Given the class of the current subject and the local name of a child
element or attribute, the resolver walks the class and its ancestors
breadth-first looking for an ``owl:allValuesFrom`` restriction on the
matching property. The first match in visiting order wins.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Set, Union

from rdflib import URIRef
from rdflib.namespace import OWL, RDFS, XSD

from xmlld import DATATYPE_SUFFIX
from xmlld.errors import RestrictionError
from xmlld.naming import create_property_name
from xmlld.ontology import OntologyClass, OntologyModel, RestrictionNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypedResource:
    """
    The resolved range of a property.

    Attributes:
        is_datatype: True if ``target`` is a datatype, False if it is a class.
        target: Identifier of the datatype or class.
    """

    is_datatype: bool
    target: URIRef


class TypeResolver:
    """Resolves property ranges against an :class:`OntologyModel`."""

    def __init__(self, ontology: OntologyModel) -> None:
        self.ontology = ontology

    @property
    def object_property_prefix(self) -> str:
        return self.ontology.object_property_prefix

    @property
    def datatype_property_prefix(self) -> str:
        return self.ontology.datatype_property_prefix

    def resolve(
        self, subject_class: Optional[OntologyClass], name: str
    ) -> Optional[TypedResource]:
        """
        Find the range of the property named after ``name`` on ``subject_class``.

        Args:
            subject_class: Class of the current subject.
            name: Local name of the child element or attribute.

        Returns:
            The resolved range, or None if no restriction in the superclass
            closure of ``subject_class`` mentions the property.
        """
        if subject_class is None:
            return None

        object_name = create_property_name(self.object_property_prefix, name)
        datatype_name = create_property_name(self.datatype_property_prefix, name)

        queue: Deque[OntologyClass] = deque([subject_class])
        visited: Set[URIRef] = set()
        while queue:
            current = queue.popleft()
            if current.identifier in visited:
                continue
            visited.add(current.identifier)

            superclasses = self.ontology.superclasses(current)
            for parent in superclasses:
                if not isinstance(parent, RestrictionNode) or not parent.is_all_values_from:
                    continue
                try:
                    result = self._match(parent, object_name, datatype_name)
                except RestrictionError as e:
                    logger.warning(
                        "Skipping restriction on %s while resolving %s: %s",
                        current.identifier,
                        name,
                        e,
                    )
                    continue
                if result is not None:
                    return result

            for parent in superclasses:
                if isinstance(parent, OntologyClass) and not self.ontology.is_enumeration(
                    parent
                ):
                    queue.append(parent)

        return None

    def _match(
        self, restriction: RestrictionNode, object_name: str, datatype_name: str
    ) -> Optional[TypedResource]:
        property_name = restriction.property_local_name()
        is_datatype = restriction.property_is_datatype()
        is_object = restriction.property_is_object()

        # A property can be declared both ways when the two prefixes coincide;
        # the range decides which one applies.
        if (
            property_name == object_name
            and self.object_property_prefix == self.datatype_property_prefix
            and is_object
            and is_datatype
        ):
            target = restriction.range()
            resolved = self.resolve_identifier(target)
            if resolved is not None and resolved.is_datatype:
                return TypedResource(True, target)
        if property_name == object_name and is_object:
            return TypedResource(False, restriction.range())
        if property_name == datatype_name and is_datatype:
            return TypedResource(True, restriction.range())
        return None

    def resolve_identifier(self, identifier: Union[str, URIRef]) -> Optional[TypedResource]:
        """
        Resolve a class or datatype directly by its identifier.

        XML Schema datatypes resolve to themselves. Otherwise the identifier
        must name an ``owl:Class``, or, with the datatype suffix appended, an
        ``rdfs:Datatype`` derived from a simple type.
        """
        uri = str(identifier)
        if uri.startswith(str(XSD)):
            return TypedResource(True, URIRef(uri))

        cls = self.ontology.get_class(uri)
        if cls is not None and cls.kind == OWL.Class:
            return TypedResource(False, cls.identifier)

        if not uri.endswith(DATATYPE_SUFFIX):
            uri += DATATYPE_SUFFIX
        cls = self.ontology.get_class(uri)
        if cls is not None and cls.kind == RDFS.Datatype:
            return TypedResource(True, cls.identifier)

        logger.debug("No class or datatype found for %s", identifier)
        return None

    @staticmethod
    def is_uri_type(typed: TypedResource) -> bool:
        return typed.is_datatype and typed.target == XSD.anyURI
