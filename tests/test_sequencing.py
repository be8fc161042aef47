"""
Tests for parent-before-child ordering of parse edges.
"""

from factories import edge, word
from pada_graph.sequencing import sequence_edges


def assert_parent_first(ordered):
    seen = set()
    defined = {item.node.pada for item in ordered}
    for item in ordered:
        if item.predecessor is not None and item.predecessor.pada in defined:
            assert item.predecessor.pada in seen, f"{item.node.pada} emitted before {item.predecessor.pada}"
        seen.add(item.node.pada)


class TestSequenceEdges:
    def test_empty(self):
        assert sequence_edges([]) == []

    def test_children_follow_parent_in_encounter_order(self, sentence_tree):
        shuffled = [sentence_tree[3], sentence_tree[2], sentence_tree[1], sentence_tree[0]]

        ordered = sequence_edges(shuffled)

        assert [item.node.pada for item in ordered] == ["bhavati", "gṛham", "tasya", "rāmaḥ"]
        assert_parent_first(ordered)

    def test_every_edge_emitted_once(self, sentence_tree):
        ordered = sequence_edges(list(reversed(sentence_tree)))
        assert len(ordered) == len(sentence_tree)
        assert sorted(map(id, ordered)) == sorted(map(id, sentence_tree))

    def test_orphans_are_swept_after_roots(self):
        root = edge(word("bhavati"))
        orphan = edge(word("tasya"), word("missing"), "ṣaṣṭhī")

        ordered = sequence_edges([orphan, root])

        assert ordered == [root, orphan]

    def test_orphan_chain_keeps_parent_first(self):
        root = edge(word("bhavati"))
        grandchild = edge(word("c"), word("b"), "rel")
        child = edge(word("b"), word("missing"), "rel")

        ordered = sequence_edges([root, grandchild, child])

        assert ordered == [root, child, grandchild]

    def test_same_word_under_two_predecessors(self):
        verb = word("gacchati")
        noun = word("vanam")
        first = edge(word("tat"), verb, "a")
        second = edge(word("tat"), noun, "b")
        leaf = edge(word("iti"), word("tat"), "c")

        ordered = sequence_edges([edge(verb), edge(noun), first, second, leaf])

        assert len(ordered) == 5
        assert ordered.index(first) < ordered.index(leaf)

    def test_cycle_terminates(self):
        a_to_b = edge(word("a"), word("b"), "x")
        b_to_a = edge(word("b"), word("a"), "y")
        self_loop = edge(word("c"), word("c"), "z")

        ordered = sequence_edges([a_to_b, b_to_a, self_loop])

        assert len(ordered) == 3
        assert self_loop in ordered
