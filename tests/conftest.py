import pytest
from lxml import etree
from rdflib import Graph

from xmlld.converter import XMLToRDFMapper
from xmlld.ontology import OntologyModel

ONTOLOGY_TTL = """
@prefix : <http://example.com/people#> .
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .

:Person a owl:Class ;
    rdfs:subClassOf
        [ a owl:Restriction ; owl:onProperty :hasName ; owl:allValuesFrom xsd:string ] ,
        [ a owl:Restriction ; owl:onProperty :hasAddress ; owl:allValuesFrom :Address ] ,
        [ a owl:Restriction ; owl:onProperty :hasRef ; owl:allValuesFrom xsd:anyURI ] ,
        [ a owl:Restriction ; owl:onProperty :hasAge ; owl:allValuesFrom xsd:integer ] ,
        [ a owl:Restriction ; owl:onProperty :hasNote ; owl:allValuesFrom :Note ] .

:Employee a owl:Class ;
    rdfs:subClassOf :Person ,
        [ a owl:Restriction ; owl:onProperty :hasSalary ; owl:allValuesFrom xsd:decimal ] .

:Address a owl:Class ;
    rdfs:subClassOf
        [ a owl:Restriction ; owl:onProperty :hasCity ; owl:allValuesFrom xsd:string ] ,
        [ a owl:Restriction ; owl:onProperty :hasZip ; owl:allValuesFrom :ZipCodeDatatype ] .

:HomeAddress a owl:Class ;
    rdfs:subClassOf :Address ,
        [ a owl:Restriction ; owl:onProperty :hasFloor ; owl:allValuesFrom xsd:integer ] .

:Note a owl:Class ;
    rdfs:subClassOf
        [ a owl:Restriction ; owl:onProperty :hasTextContent ; owl:allValuesFrom xsd:string ] ,
        [ a owl:Restriction ; owl:onProperty :hasEmphasis ; owl:allValuesFrom xsd:string ] .

:ZipCodeDatatype a rdfs:Datatype .

:hasName a owl:DatatypeProperty .
:hasRef a owl:DatatypeProperty .
:hasAge a owl:DatatypeProperty .
:hasSalary a owl:DatatypeProperty .
:hasCity a owl:DatatypeProperty .
:hasZip a owl:DatatypeProperty .
:hasFloor a owl:DatatypeProperty .
:hasTextContent a owl:DatatypeProperty .
:hasEmphasis a owl:DatatypeProperty .
:hasAddress a owl:ObjectProperty .
:hasNote a owl:ObjectProperty .
"""


def parse_ontology(data: str = ONTOLOGY_TTL, **kwargs) -> OntologyModel:
    return OntologyModel(Graph().parse(data=data, format="turtle"), **kwargs)


@pytest.fixture
def ontology():
    return parse_ontology()


@pytest.fixture
def convert_xml(ontology):
    def convert(xml: str, **kwargs) -> Graph:
        mapper = XMLToRDFMapper(etree.fromstring(xml), ontology, **kwargs)
        return mapper.convert()

    return convert
