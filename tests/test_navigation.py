import pytest

from odtfill.dom import (
    ancestors,
    branch_anchor,
    child_path,
    common_ancestor,
    detach,
    insert_after,
    is_attached,
    iter_text_nodes,
    node_at_path,
    text_content,
    traverse,
)
from tests.infrastructure.odt_builders import office_text, parse_body


class TestNavigation:

    def setup_method(self):
        self.document = parse_body(
            "<text:p>a<text:span>b</text:span></text:p>"
            "<text:p>c</text:p>"
        )
        self.body = office_text(self.document)
        self.p1, self.p2 = self.body.childNodes
        self.a = self.p1.firstChild
        self.b = self.p1.childNodes[1].firstChild
        self.c = self.p2.firstChild

    def test_ancestors(self):
        chain = ancestors(self.b)
        assert chain[0] is self.b
        assert chain[2] is self.p1
        assert chain[-1] is self.document

    def test_ancestors_stop_at(self):
        assert ancestors(self.b, self.p1) == [self.b, self.b.parentNode, self.p1]

    def test_common_ancestor(self):
        assert common_ancestor(self.a, self.b) is self.p1
        assert common_ancestor(self.b, self.c) is self.body
        assert common_ancestor(self.a, self.a) is self.a

    def test_common_ancestor_disjoint(self):
        other = parse_body("<text:p/>")
        with pytest.raises(ValueError):
            common_ancestor(self.a, other)

    def test_branch_anchor(self):
        assert branch_anchor(self.b, self.body) is self.p1
        assert branch_anchor(self.p2, self.body) is self.p2

    def test_is_attached(self):
        assert is_attached(self.b, self.document)
        detach(self.p1)
        assert not is_attached(self.b, self.document)

    def test_traverse_is_post_order(self):
        visited = []
        traverse(self.p1, lambda n: visited.append(n))
        assert visited == [self.a, self.b, self.b.parentNode, self.p1]

    def test_text_helpers(self):
        assert [n.data for n in iter_text_nodes(self.body)] == ["a", "b", "c"]
        assert text_content(self.body) == "abc"

    def test_paths(self):
        path = child_path(self.b, self.body)
        assert path == [0, 1, 0]
        assert node_at_path(self.body, path) is self.b

    def test_insert_after(self):
        new = self.document.createTextNode("z")
        insert_after(new, self.a)
        assert self.p1.childNodes[1] is new

        last = self.document.createTextNode("end")
        insert_after(last, self.p2)
        assert self.body.lastChild is last
