import random

from rdflib import Namespace, URIRef

from xmlld.naming import ResourceNamer, RunContext, create_property_name, local_name

PEOPLE = Namespace("http://example.com/people#")


def test_create_property_name_capitalises_first_letter():
    assert create_property_name("has", "address") == "hasAddress"


def test_create_property_name_without_prefix():
    assert create_property_name("", "address") == "address"


def test_local_name_after_fragment():
    assert local_name("http://example.com/people#Person") == "Person"


def test_local_name_after_path_and_colon():
    assert local_name("http://example.com/people/Person") == "Person"
    assert local_name("urn:example:Person") == "Person"


def test_mint_composes_identifier():
    namer = ResourceNamer("http://www.example.org/example#", RunContext(nonce=42))
    assert namer.mint(PEOPLE.Person) == URIRef(
        "http://www.example.org/example#INS_42_Person_1"
    )


def test_mint_counts_per_class():
    context = RunContext(nonce=7)
    namer = ResourceNamer("http://base#", context)
    persons = [namer.mint(PEOPLE.Person) for _ in range(3)]
    address = namer.mint(PEOPLE.Address)

    assert [str(p).rsplit("_", 1)[1] for p in persons] == ["1", "2", "3"]
    assert str(address).endswith("_Address_1")
    assert context.counts[str(PEOPLE.Person)] == 4


def test_mint_never_repeats_for_classes_sharing_a_local_name():
    namer = ResourceNamer("http://base#", RunContext(nonce=1))
    minted = {
        namer.mint(URIRef("http://a.example/ns#Item")),
        namer.mint(URIRef("http://b.example/ns#Item")),
        namer.mint(URIRef("http://a.example/ns#Item")),
    }
    assert len(minted) == 3


def test_run_context_seeds_named_ontology_resources(ontology):
    context = RunContext.create(ontology, random.Random(3))
    assert context.counts[str(PEOPLE.Person)] == 1
    assert context.counts[str(PEOPLE.hasName)] == 1
    assert 0 <= context.nonce < 9999999


def test_run_context_nonce_comes_from_rng():
    first = RunContext.create(rng=random.Random(11))
    second = RunContext.create(rng=random.Random(11))
    assert first.nonce == second.nonce
