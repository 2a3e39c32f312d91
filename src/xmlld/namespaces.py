"""
Working namespace of an instance document and the prefixes bound in the
output graph.
"""

import logging
import re
from typing import Optional
from urllib.parse import urlsplit

from lxml import etree
from rdflib import Graph, URIRef

from xmlld import FALLBACK_PREFIX, NOT_ABSOLUTE_NS, NOT_VALID_NS
from xmlld.errors import MappingError
from xmlld.ontology import OntologyModel

logger = logging.getLogger(__name__)

INVALID_IRI_CHARS = re.compile(r'[<>"{}|\\^`\s]')
NCNAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")


def is_valid_prefix(prefix: Optional[str]) -> bool:
    return bool(prefix) and NCNAME.match(prefix) is not None


class PrefixManager:
    """
    Tracks the working namespace used to turn unqualified XML names into
    property and class identifiers, and the prefix bindings of the output
    graph.

    Args:
        graph: Output graph to bind prefixes on.
        base_uri: Base identifier of the run; the empty prefix is bound to it.
        namespace: Explicit working namespace (``#``-terminated). When set,
            nothing is derived from the root element.
        prefix: Explicit prefix for the working namespace.
    """

    def __init__(
        self,
        graph: Graph,
        base_uri: str,
        namespace: Optional[str] = None,
        prefix: Optional[str] = None,
    ) -> None:
        self.graph = graph
        self.base_uri = base_uri
        self.configured_namespace = namespace
        self.configured_prefix = prefix
        self._namespace: Optional[str] = None

    @property
    def namespace(self) -> str:
        if self._namespace is None:
            raise MappingError("The working namespace has not been derived yet")
        return self._namespace

    def bind(self, prefix: str, namespace: str) -> None:
        self.graph.bind(prefix, URIRef(namespace), override=True, replace=True)

    def copy_bindings(self, ontology: OntologyModel) -> None:
        """Copy the ontology's prefixes; the empty prefix refers to the base."""
        for prefix, namespace in ontology.namespaces().items():
            if prefix == "":
                self.bind("", self.base_uri)
            else:
                self.bind(prefix, namespace)

    def derive(self, root: etree._Element) -> str:
        """
        Set the working namespace from the root element, unless one was
        configured explicitly, and bind a prefix for it.

        Returns:
            The working namespace.
        """
        if self._namespace is not None:
            return self._namespace

        if self.configured_namespace:
            self._namespace = self.configured_namespace
            self.bind(self.configured_prefix or self._guess_prefix(root), self._namespace)
            return self._namespace

        root_namespace = etree.QName(root).namespace
        if root_namespace is None:
            logger.warning("Root element %s has no namespace", root.tag)
            return self._fallback(NOT_ABSOLUTE_NS)
        if INVALID_IRI_CHARS.search(root_namespace):
            return self._fallback(NOT_VALID_NS)
        try:
            absolute = bool(urlsplit(root_namespace).scheme)
        except ValueError:
            return self._fallback(NOT_VALID_NS)
        if not absolute:
            logger.warning("Namespace %s is not absolute", root_namespace)
            return self._fallback(NOT_ABSOLUTE_NS)

        self._namespace = root_namespace + "#"
        if is_valid_prefix(self.configured_prefix):
            prefix = self.configured_prefix
        else:
            prefix = self._guess_prefix(root)
        self.bind(prefix, self._namespace)
        logger.debug("Working namespace %s bound to prefix %s", self._namespace, prefix)
        return self._namespace

    def _guess_prefix(self, root: etree._Element) -> str:
        if is_valid_prefix(root.prefix):
            return root.prefix
        root_namespace = etree.QName(root).namespace or ""
        # For A/B/C or A:B:C the prefix is C.
        for separator in ("/", ":"):
            index = root_namespace.rfind(separator)
            if index != -1:
                candidate = root_namespace[index + 1 :]
                if is_valid_prefix(candidate):
                    return candidate
        return FALLBACK_PREFIX

    def _fallback(self, sentinel: str) -> str:
        self._namespace = sentinel
        self.bind(FALLBACK_PREFIX, sentinel)
        return sentinel

    def expand(self, name: str, element: etree._Element) -> str:
        """
        Expand a possibly prefixed name such as ``xsi:type`` values.

        Prefixes are resolved against the namespace declarations in scope at
        ``element``; unqualified names use the working namespace.
        """
        if ":" in name:
            prefix, local = name.split(":", 1)
            uri = element.nsmap.get(prefix)
            if uri is None:
                raise MappingError(f"Undeclared namespace prefix {prefix!r} in {name!r}")
            return uri + "#" + local
        return self.namespace + name
