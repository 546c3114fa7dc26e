"""
Consolidation and isolation of markers split across formatting runs.
"""

from odtfill.dom import text_content
from odtfill.templating import consolidate_markers, isolate_markers, prepare_template_tree
from odtfill.templating.consolidate import consolidate_container
from tests.infrastructure.odt_builders import office_text, parse_body


def _child_texts(element):
    return [
        child.data if child.nodeType == child.TEXT_NODE else ("<" + child.tagName + ">" + text_content(child))
        for child in element.childNodes
    ]


class TestConsolidation:

    def test_marker_split_in_two_runs(self):
        document = parse_body("<text:p>{#ea<text:span>ch xs as x}</text:span> après</text:p>")
        paragraph = office_text(document).firstChild

        assert consolidate_markers(document) == 1
        assert _child_texts(paragraph) == ["{#each xs as x}", " après"]

    def test_marker_split_in_three_runs(self):
        document = parse_body(
            '<text:p>A {<text:span text:style-name="b">na</text:span>'
            '<text:span text:style-name="i">me} B</text:span></text:p>'
        )
        paragraph = office_text(document).firstChild

        assert consolidate_container(paragraph) == 1
        assert _child_texts(paragraph) == ["A ", "{name}", "<text:span> B"]
        assert text_content(paragraph) == "A {name} B"

    def test_text_around_marker_keeps_formatting(self):
        document = parse_body(
            '<text:p><text:span text:style-name="b">gras {va</text:span>'
            '<text:span text:style-name="i">leur} italique</text:span></text:p>'
        )
        paragraph = office_text(document).firstChild

        consolidate_markers(document)

        first, marker, last = paragraph.childNodes
        assert first.tagName == "text:span" and text_content(first) == "gras "
        assert marker.data == "{valeur}"
        assert last.tagName == "text:span" and text_content(last) == " italique"

    def test_nested_spans(self):
        document = parse_body(
            "<text:p>{#if<text:span><text:span> ok</text:span>}</text:span>suite</text:p>"
        )
        paragraph = office_text(document).firstChild

        consolidate_markers(document)

        assert _child_texts(paragraph) == ["{#if ok}", "suite"]

    def test_whole_markers_untouched(self):
        document = parse_body("<text:p>{a} et <text:span>{b}</text:span></text:p>")
        paragraph = office_text(document).firstChild

        assert consolidate_markers(document) == 0
        assert _child_texts(paragraph) == ["{a} et ", "<text:span>{b}"]

    def test_several_markers_in_one_paragraph(self):
        document = parse_body(
            "<text:p>{x<text:span>}{/each</text:span>} fin {y}</text:p>"
        )
        paragraph = office_text(document).firstChild

        assert consolidate_markers(document) == 2
        assert text_content(paragraph) == "{x}{/each} fin {y}"
        texts = [n.data for n in paragraph.childNodes if n.nodeType == n.TEXT_NODE]
        assert "{/each}" in texts

    def test_headings_are_containers(self):
        document = parse_body("<text:h>{ti<text:span>tre}</text:span></text:h>")
        consolidate_markers(document)
        assert _child_texts(office_text(document).firstChild) == ["{titre}"]


class TestIsolation:

    def test_markers_get_their_own_nodes(self):
        document = parse_body("<text:p>a{x}b{y}</text:p>")
        paragraph = office_text(document).firstChild

        marker_nodes = isolate_markers(document)

        assert [n.data for n in paragraph.childNodes] == ["a", "{x}", "b", "{y}"]
        assert [n.data for n in marker_nodes] == ["{x}", "{y}"]

    def test_adjacent_markers(self):
        document = parse_body("<text:p>{#each l as n}{n}{/each}</text:p>")
        paragraph = office_text(document).firstChild

        isolate_markers(document)

        assert [n.data for n in paragraph.childNodes] == ["{#each l as n}", "{n}", "{/each}"]

    def test_plain_text_untouched(self):
        document = parse_body("<text:p>rien { } ici</text:p>")
        assert isolate_markers(document) == []
        assert office_text(document).firstChild.firstChild.data == "rien { } ici"

    def test_prepare_runs_both_passes(self):
        document = parse_body("<text:p>Les {#ea<text:span>ch n as x}</text:span>{x} !</text:p>")
        paragraph = office_text(document).firstChild

        prepare_template_tree(document)

        assert [n.data for n in paragraph.childNodes] == ["Les ", "{#each n as x}", "{x}", " !"]
