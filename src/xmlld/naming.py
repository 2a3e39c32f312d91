"""
Naming helpers: property names derived from XML names, and unique resource
identifiers minted for the instances created during one conversion run.
"""

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional, Set

from rdflib import URIRef

from xmlld import INSTANCE_NAME_PREFIX

if TYPE_CHECKING:
    from xmlld.ontology import OntologyModel

# Upper bound (exclusive) of the per-run nonce.
NONCE_BOUND = 9999999


def create_property_name(prefix: str, name: str) -> str:
    """
    Build a property local name from an element or attribute name.

    >>> create_property_name("has", "address")
    'hasAddress'
    """
    if not prefix or not name:
        return name
    return prefix + name[0].upper() + name[1:]


def local_name(identifier: str) -> str:
    """Return the part of an IRI after its last ``#``, ``/`` or ``:``."""
    identifier = str(identifier)
    for separator in ("#", "/", ":"):
        index = identifier.rfind(separator)
        if index != -1:
            return identifier[index + 1 :]
    return identifier


@dataclass
class RunContext:
    """
    State owned by a single conversion run.

    ``counts`` maps a class identifier to the next counter to use for it.
    """

    nonce: int
    counts: Dict[str, int] = field(default_factory=dict)
    issued: Set[str] = field(default_factory=set)

    @classmethod
    def create(
        cls, ontology: Optional["OntologyModel"] = None, rng: Optional[random.Random] = None
    ) -> "RunContext":
        rng = rng or random.Random()
        counts: Dict[str, int] = {}
        if ontology is not None:
            # Start at 1 for names the ontology already uses.
            counts = {str(uri): 1 for uri in ontology.named_resources()}
        return cls(nonce=rng.randrange(NONCE_BOUND), counts=counts)


class ResourceNamer:
    """Mints identifiers of the form ``base + prefix + nonce_localName_counter``."""

    def __init__(
        self,
        base_uri: str,
        context: RunContext,
        instance_prefix: str = INSTANCE_NAME_PREFIX,
    ) -> None:
        self.base_uri = base_uri
        self.context = context
        self.instance_prefix = instance_prefix

    def mint(self, class_identifier: str) -> URIRef:
        key = str(class_identifier)
        name = local_name(key)
        while True:
            counter = self.context.counts.get(key, 1)
            self.context.counts[key] = counter + 1
            identifier = (
                f"{self.base_uri}{self.instance_prefix}{self.context.nonce}"
                f"_{name}_{counter}"
            )
            # Classes from different namespaces may share a local name.
            if identifier not in self.context.issued:
                self.context.issued.add(identifier)
                return URIRef(identifier)
