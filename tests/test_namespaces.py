import pytest
from lxml import etree
from rdflib import Graph, URIRef
from rdflib.namespace import XSD

from xmlld import NOT_ABSOLUTE_NS
from xmlld.errors import MappingError
from xmlld.namespaces import PrefixManager, is_valid_prefix
from xmlld.ontology import OntologyModel


def manager(**kwargs) -> PrefixManager:
    return PrefixManager(Graph(), "http://base.example.org/run#", **kwargs)


def bindings(prefixes: PrefixManager) -> dict:
    return {prefix: str(ns) for prefix, ns in prefixes.graph.namespaces()}


def test_namespace_and_prefix_from_path_segment():
    prefixes = manager()
    root = etree.fromstring('<Person xmlns="http://example.com/people"/>')

    assert prefixes.derive(root) == "http://example.com/people#"
    assert bindings(prefixes)["people"] == "http://example.com/people#"


def test_root_prefix_is_preferred():
    prefixes = manager()
    root = etree.fromstring('<p:Person xmlns:p="http://example.com/people"/>')
    prefixes.derive(root)
    assert bindings(prefixes)["p"] == "http://example.com/people#"


def test_configured_prefix_is_preferred_over_root_prefix():
    prefixes = manager(prefix="ppl")
    root = etree.fromstring('<p:Person xmlns:p="http://example.com/people"/>')
    prefixes.derive(root)
    assert bindings(prefixes)["ppl"] == "http://example.com/people#"


def test_prefix_from_colon_segment():
    prefixes = manager()
    root = etree.fromstring('<Person xmlns="urn:example:people"/>')
    assert prefixes.derive(root) == "urn:example:people#"
    assert bindings(prefixes)["people"] == "urn:example:people#"


def test_unusable_segment_falls_back_to_fixed_prefix():
    prefixes = manager()
    root = etree.fromstring('<Person xmlns="http://example.com/people/"/>')
    prefixes.derive(root)
    assert bindings(prefixes)["NS"] == "http://example.com/people/#"


def test_missing_namespace_uses_sentinel():
    prefixes = manager()
    assert prefixes.derive(etree.fromstring("<Person/>")) == NOT_ABSOLUTE_NS
    assert bindings(prefixes)["NS"] == NOT_ABSOLUTE_NS


def test_relative_namespace_uses_sentinel():
    prefixes = manager()
    root = etree.fromstring('<Person xmlns="people"/>')
    assert prefixes.derive(root) == NOT_ABSOLUTE_NS


def test_explicit_namespace_skips_derivation():
    prefixes = manager(namespace="http://other.example.org/ns#", prefix="o")
    root = etree.fromstring('<Person xmlns="http://example.com/people"/>')
    assert prefixes.derive(root) == "http://other.example.org/ns#"
    assert bindings(prefixes)["o"] == "http://other.example.org/ns#"


def test_namespace_is_required_before_derivation():
    with pytest.raises(MappingError):
        manager().namespace


def test_copy_bindings_remaps_empty_prefix():
    graph = Graph()
    graph.bind("", "http://example.com/people#")
    graph.bind("owl", "http://www.w3.org/2002/07/owl#")
    prefixes = manager()
    prefixes.copy_bindings(OntologyModel(graph))
    bound = bindings(prefixes)
    assert bound[""] == "http://base.example.org/run#"
    assert bound["owl"] == "http://www.w3.org/2002/07/owl#"


def test_expand_names():
    prefixes = manager()
    root = etree.fromstring(
        '<Person xmlns="http://example.com/people" '
        'xmlns:xs="http://www.w3.org/2001/XMLSchema"/>'
    )
    prefixes.derive(root)

    assert prefixes.expand("xs:string", root) == str(XSD.string)
    assert URIRef(prefixes.expand("Employee", root)) == URIRef(
        "http://example.com/people#Employee"
    )
    with pytest.raises(MappingError, match="Undeclared namespace prefix"):
        prefixes.expand("zz:Employee", root)


def test_is_valid_prefix():
    assert is_valid_prefix("people")
    assert not is_valid_prefix("")
    assert not is_valid_prefix(None)
    assert not is_valid_prefix("//example.com")
