"""
Module: converter.py

This module converts XML instance documents into RDF with respect to an
OWL ontology that was derived from the schema of the instance. Elements
whose type is a class become new resources linked to their parent through
an object property; elements and attributes whose type is a datatype become
typed literals. Text interleaved with child elements is kept only for
classes that allow mixed content.

Usage:
    ontology = OntologyModel.from_file("schema.owl")
    mapper = XMLToRDFMapper("instance.xml", ontology)
    mapper.convert()
    mapper.write_model("instance.rdf", format="RDF/XML")
"""

import logging
import random
from pathlib import Path
from typing import IO, Optional, Union

from lxml import etree
from rdflib import Graph, Literal, URIRef
from rdflib.namespace import OWL, RDF, XSD

from xmlld import (
    DEFAULT_BASE_NS,
    MIXED_CONTENT_PROPERTY_NAME,
    NAMESPACES,
)
from xmlld.errors import DocumentParseError, MappingError
from xmlld.naming import ResourceNamer, RunContext, create_property_name
from xmlld.namespaces import PrefixManager
from xmlld.ontology import OntologyClass, OntologyModel, rdf_format
from xmlld.resolver import TypedResource, TypeResolver

logger = logging.getLogger(__name__)

XSI_NS = NAMESPACES["xsi"]
XSI_TYPE = f"{{{XSI_NS}}}type"
XML_NS = "http://www.w3.org/XML/1998/namespace"

# Attributes in these namespaces steer XML processing and carry no data.
CONTROL_NAMESPACES = (XSI_NS, XML_NS)

XML_FORMATS = ("xml", "pretty-xml")

DocumentSource = Union[str, Path, IO, etree._ElementTree, etree._Element]


class BaseConverter:
    """Loading helpers shared by converters."""

    @staticmethod
    def load_document(source: DocumentSource) -> etree._ElementTree:
        """
        Parse an XML instance document.

        Args:
            source: Path, file object, or an already parsed lxml tree or element.

        Raises:
            DocumentParseError: If the document cannot be read or is not
                well-formed.
        """
        if isinstance(source, etree._ElementTree):
            return source
        if isinstance(source, etree._Element):
            return source.getroottree()
        if isinstance(source, Path):
            source = str(source)

        parser = etree.XMLParser(remove_comments=True, resolve_entities=False)
        try:
            return etree.parse(source, parser)
        except (etree.XMLSyntaxError, OSError) as e:
            raise DocumentParseError(f"Failed to parse XML document: {source}: {e}") from e

    @staticmethod
    def load_ontology(ontology: Union[OntologyModel, str, Path]) -> OntologyModel:
        if isinstance(ontology, OntologyModel):
            return ontology
        return OntologyModel.from_file(ontology)


class XMLToRDFMapper(BaseConverter):
    """
    Converts one XML instance document to an RDF graph.

    A mapper holds the state of a single run (nonce, resource counters and
    the output graph) and cannot be reused; create a new one per document.

    Args:
        document: The XML instance (path, file object or lxml tree).
        ontology: The ontology derived from the instance's schema, or a path
            to it.
        base_ns: Namespace of the minted instance resources, without ``#``.
        namespace: Working namespace (``#``-terminated) to use instead of
            the one derived from the root element.
        prefix: Prefix to bind the working namespace to.
        rng: Random source for the run nonce.
    """

    def __init__(
        self,
        document: DocumentSource,
        ontology: Union[OntologyModel, str, Path],
        base_ns: str = DEFAULT_BASE_NS,
        namespace: Optional[str] = None,
        prefix: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.document = self.load_document(document)
        self.ontology = self.load_ontology(ontology)
        self.resolver = TypeResolver(self.ontology)
        self.namespace = namespace
        self.prefix = prefix
        self.rng = rng
        self.set_base_ns(base_ns)

        self.graph: Optional[Graph] = None
        self._started = False
        self._output: Optional[Graph] = None
        self._prefixes: Optional[PrefixManager] = None
        self._namer: Optional[ResourceNamer] = None

    def set_base_ns(self, base_ns: str) -> None:
        """
        Set the namespace of minted resources.

        Args:
            base_ns: Namespace without a trailing ``#``, e.g.
                ``http://www.example.org/example``.
        """
        self.base_ns = base_ns
        self.base_uri = base_ns + "#"

    def set_namespace_prefix(self, namespace: str, prefix: str) -> None:
        """
        Use ``namespace`` (with ``#``) as the working namespace, bound to ``prefix``.
        """
        self.namespace = namespace
        self.prefix = prefix

    def convert(self) -> Graph:
        """
        Map the whole document into a new graph.

        Returns:
            Graph: The instance data.

        Raises:
            MappingError: If a node cannot be mapped, or the mapper was
                already used.
        """
        if self._started:
            raise MappingError("A mapper converts a single document; create a new one")
        self._started = True

        output = Graph(bind_namespaces="core")
        self._output = output
        self._prefixes = PrefixManager(output, self.base_uri, self.namespace, self.prefix)
        self._prefixes.copy_bindings(self.ontology)
        self._namer = ResourceNamer(self.base_uri, RunContext.create(self.ontology, self.rng))

        root = self.document.getroot()
        try:
            self._traverse_root(root)
        except MappingError as e:
            raise e.prepend(self._step(root))
        except Exception as e:
            raise MappingError(str(e), [self._step(root)]) from e
        finally:
            self._output = None
            self._prefixes = None
            self._namer = None

        self.graph = output
        logger.info("Mapped %s to %d triples", root.tag, len(output))
        return output

    def _traverse_root(self, root: etree._Element) -> None:
        namespace = self._prefixes.derive(root)

        root_class = None
        override = self._override_type(root)
        if override is not None and not override.is_datatype:
            root_class = self._class_of(override.target)
        if root_class is None:
            root_class = self.ontology.get_class(namespace + etree.QName(root).localname)
        if root_class is None:
            raise MappingError(f"No ontology class found for root element {root.tag}")

        subject = self._create_resource(root_class.identifier)
        self._traverse_attributes(root, subject, root_class)
        self._traverse_content(root, subject, root_class)

    def _traverse_content(
        self,
        element: etree._Element,
        subject: URIRef,
        subject_class: OntologyClass,
    ) -> None:
        self._read_text(element.text, subject, subject_class)
        for child in element:
            # Comments and processing instructions have a non-string tag.
            if isinstance(child.tag, str):
                try:
                    self._traverse_element(child, subject, subject_class)
                except MappingError as e:
                    raise e.prepend(self._step(child))
                except Exception as e:
                    raise MappingError(str(e), [self._step(child)]) from e
            self._read_text(child.tail, subject, subject_class)

    def _traverse_element(
        self,
        element: etree._Element,
        subject: URIRef,
        subject_class: OntologyClass,
    ) -> None:
        name = etree.QName(element).localname
        object_type = self._element_type(element, subject_class, name)
        if object_type is None:
            logger.warning(
                "No property found for element %s of %s", name, subject_class.identifier
            )
            return

        if object_type.is_datatype:
            text = (element.text or "").strip()
            if text:
                prop = self._property(self.ontology.datatype_property_prefix, name)
                self._output.add(
                    (subject, prop, Literal(text, datatype=object_type.target))
                )
            return

        obj = self._create_resource(object_type.target)
        prop = self._property(self.ontology.object_property_prefix, name)
        self._output.add((subject, prop, obj))

        object_class = self._class_of(object_type.target)
        self._traverse_attributes(element, obj, object_class)
        self._traverse_content(element, obj, object_class)

    def _traverse_attributes(
        self,
        element: etree._Element,
        subject: URIRef,
        subject_class: OntologyClass,
    ) -> None:
        for key, value in element.attrib.items():
            qname = etree.QName(key)
            if qname.namespace in CONTROL_NAMESPACES:
                continue
            try:
                self._read_attribute(qname.localname, value, subject, subject_class)
            except MappingError as e:
                raise e.prepend("@" + qname.localname)
            except Exception as e:
                raise MappingError(str(e), ["@" + qname.localname]) from e

    def _read_attribute(
        self, name: str, value: str, subject: URIRef, subject_class: OntologyClass
    ) -> None:
        prop = self._property(self.ontology.datatype_property_prefix, name)
        attribute_type = self.resolver.resolve(subject_class, name)

        if attribute_type is None or not attribute_type.is_datatype:
            logger.warning(
                "No datatype property found for attribute %s of %s, adding it as a plain literal",
                name,
                subject_class.identifier,
            )
            self._output.add((subject, prop, Literal(value)))
        elif self.resolver.is_uri_type(attribute_type):
            self._output.add((subject, prop, URIRef(value)))
        else:
            self._output.add((subject, prop, Literal(value, datatype=attribute_type.target)))

    def _read_text(
        self, text: Optional[str], subject: URIRef, subject_class: OntologyClass
    ) -> None:
        if text is None or not text.strip():
            return
        if not self.ontology.is_mixed_class(subject_class.identifier):
            return
        prop = self._property(
            self.ontology.datatype_property_prefix, MIXED_CONTENT_PROPERTY_NAME
        )
        self._output.add((subject, prop, Literal(text.strip(), datatype=XSD.string)))

    def _element_type(
        self, element: etree._Element, subject_class: OntologyClass, name: str
    ) -> Optional[TypedResource]:
        """
        The type of an element: its xsi:type when present, otherwise the
        range found through the restrictions of ``subject_class``.
        """
        if element.get(XSI_TYPE):
            return self._override_type(element)
        return self.resolver.resolve(subject_class, name)

    def _override_type(self, element: etree._Element) -> Optional[TypedResource]:
        override = element.get(XSI_TYPE)
        if not override:
            return None
        identifier = self._prefixes.expand(override.strip(), element)
        typed = self.resolver.resolve_identifier(identifier)
        if typed is None:
            logger.warning("Unknown xsi:type %s on %s", override, element.tag)
        return typed

    def _class_of(self, identifier: URIRef) -> OntologyClass:
        return self.ontology.get_class(identifier) or OntologyClass(identifier, OWL.Class)

    def _create_resource(self, class_identifier: URIRef) -> URIRef:
        resource = self._namer.mint(class_identifier)
        self._output.add((resource, RDF.type, URIRef(class_identifier)))
        return resource

    def _property(self, prefix: str, name: str) -> URIRef:
        return URIRef(self._prefixes.namespace + create_property_name(prefix, name))

    @staticmethod
    def _step(element: etree._Element) -> str:
        """Path step for error messages, e.g. ``address`` or ``address[2]``."""
        name = etree.QName(element).localname
        parent = element.getparent()
        if parent is None:
            return name
        same = [sibling for sibling in parent if sibling.tag == element.tag]
        if len(same) == 1:
            return name
        return f"{name}[{same.index(element) + 1}]"

    def write_model(self, destination: Union[str, IO], format: str = "turtle") -> None:
        """
        Save the converted graph.

        Args:
            destination: Path or binary stream to write to.
            format: One of ``RDF/XML``, ``RDF/XML-ABBREV``, ``N-TRIPLE``, ``N3``
                or any rdflib serializer name. The XML formats carry an
                ``xml:base`` declaration for the base namespace.
        """
        if self.graph is None:
            raise MappingError("Nothing to write; convert() has not completed")
        serializer = rdf_format(format)
        if serializer in XML_FORMATS:
            # Minted names are written as "#INS_..." relative to xml:base.
            self.graph.serialize(destination, format=serializer, base=self.base_ns)
        else:
            self.graph.serialize(destination, format=serializer)

    def write_ontology(self, destination: Union[str, IO], format: str = "turtle") -> None:
        """
        Save the ontology the mapper was built with.
        """
        self.ontology.graph.serialize(destination, format=rdf_format(format))
