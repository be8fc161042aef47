"""
Shared fixtures for parse graph tests.
"""

import os

import pytest

from factories import edge, result, word

# Keep a developer .env from leaking layout settings into tests.
for _name in (
    "PADA_GRAPH_LAYOUT",
    "PADA_GRAPH_DIRECTION",
    "PADA_GRAPH_NODE_WIDTH",
    "PADA_GRAPH_NODE_HEIGHT",
    "PADA_GRAPH_NODE_SPACING_X",
    "PADA_GRAPH_NODE_SPACING_Y",
):
    os.environ.pop(_name, None)


@pytest.fixture
def sentence_results():
    """Two parses of 'vāgvidāṃ varam' sharing most of their relations."""
    varam = word("varam", "noun", "acc", "sg", root="vara")
    vagvidam = word("vāgvidāṃ", "noun", "gen", "pl", root="vāgvid")
    first = result(
        [edge(varam), edge(vagvidam, varam, "ṣaṣṭhīsambandhaḥ")],
        [edge(varam), edge(vagvidam, varam, "viśeṣaṇam")],
    )
    second = result(
        [edge(word("varam", "noun", "acc", root="vara")), edge(vagvidam, varam, "ṣaṣṭhīsambandhaḥ")],
    )
    return [first, second]


@pytest.fixture
def sentence_tree():
    """bhavati governs rāmaḥ and gṛham; gṛham governs tasya."""
    bhavati = word("bhavati", "verb", "pres", root="bhū")
    ramah = word("rāmaḥ", "noun", "nom", root="rāma")
    grham = word("gṛham", "noun", "nom", root="gṛha")
    tasya = word("tasya", "pron", "gen", root="tad")
    return [
        edge(bhavati),
        edge(ramah, bhavati, "kartā"),
        edge(grham, bhavati, "karma"),
        edge(tasya, grham, "ṣaṣṭhīsambandhaḥ"),
    ]
