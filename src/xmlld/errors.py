"""Error types raised while loading documents and mapping them to RDF."""

from typing import List, Optional


class XMLLDError(Exception):
    """Base class for all xmlld errors."""


class DocumentParseError(XMLLDError, ValueError):
    """Raised when an XML instance document cannot be parsed."""


class OntologyLoadError(XMLLDError, ValueError):
    """Raised when an ontology document cannot be parsed."""


class RestrictionError(XMLLDError):
    """Raised when an OWL restriction does not have the expected shape."""


class MappingError(XMLLDError):
    """
    Fatal failure while traversing an XML instance.

    The error carries the path of the node that failed, built up as the
    error propagates back through the tree, so the caller gets a single
    message such as ``Failed to map /Person/address/@ref: ...``.
    """

    def __init__(self, message: str, path: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = list(path or [])

    def prepend(self, step: str) -> "MappingError":
        self.path.insert(0, step)
        return self

    @property
    def location(self) -> str:
        return "/" + "/".join(self.path)

    def __str__(self) -> str:
        if not self.path:
            return self.message
        return f"Failed to map {self.location}: {self.message}"
