from breedcalc.pedigree.analysis.analyzer import ancestors_of, path_ids, paths_are_independent, simple_paths
from breedcalc.pedigree.graph import Individual, PedigreeGraph
from .fixtures import COW_INBRED_SIRE


def _ids(individuals):
    return {i.identifier for i in individuals}


def test_ancestors_exclude_self_and_reconverge_once():
    graph = PedigreeGraph().load([COW_INBRED_SIRE])
    cow = graph.get("C2")
    assert _ids(ancestors_of(cow)) == {"B1", "B2", "P1", "P2", "M"}
    assert ancestors_of(graph.get("M")) == set()


def test_ancestors_terminate_on_cycles():
    a = Individual("A")
    b = Individual("B", dam=a)
    a.sire = b
    assert _ids(ancestors_of(a)) == {"B"}
    assert _ids(ancestors_of(b)) == {"A"}


def test_simple_paths_to_self_is_trivial():
    a = Individual("A")
    assert simple_paths(a, a) == [(a,)]


def test_simple_paths_unreachable_is_empty():
    a, b = Individual("A"), Individual("B")
    assert simple_paths(a, b) == []
    assert simple_paths(None, b) == []


def test_simple_paths_enumerates_every_route():
    graph = PedigreeGraph().load([COW_INBRED_SIRE])
    cow, m = graph.get("C2"), graph.get("M")
    paths = sorted(path_ids(p) for p in simple_paths(cow, m))
    assert paths == [
        ("C2", "B1", "P1", "M"),
        ("C2", "B1", "P2", "M"),
        ("C2", "B2", "P1", "M"),
        ("C2", "B2", "P2", "M"),
    ]


def test_simple_paths_never_revisit_a_node():
    a = Individual("A")
    b = Individual("B", dam=a)
    c = Individual("C", dam=b)
    a.sire = c  # A -> C -> B -> A
    target = Individual("T")
    b.sire = target
    paths = [path_ids(p) for p in simple_paths(c, target)]
    assert paths == [("C", "B", "T")]


def test_paths_are_independent():
    assert paths_are_independent(("X", "A"), ("Y", "A"))
    assert paths_are_independent(("X", "P", "A"), ("Y", "Q", "A"))
    assert not paths_are_independent(("X", "P", "A"), ("Y", "P", "A"))
    # the shared ancestor and the two start nodes do not count
    assert paths_are_independent(("X", "P", "A"), ("Y", "X", "A"))
