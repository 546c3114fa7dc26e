"""
Loop expansion.
"""

from odtfill.templating import fill_document, materialize_items
from tests.infrastructure.odt_builders import office_text, paragraph_texts, parse_body


def fill(body, data):
    document = parse_body(body)
    fill_document(document, data)
    return document


class TestMaterializeItems:

    def test_values(self):
        assert materialize_items([1, 2]) == [1, 2]
        assert materialize_items((1, 2)) == [1, 2]
        assert materialize_items(x for x in "ab") == ["a", "b"]
        assert materialize_items("ab") == ["a", "b"]
        assert materialize_items(None) == []
        assert materialize_items({"a": 1}) == []
        assert materialize_items(3) == []


class TestEachBlocks:

    def test_paragraph_per_item(self):
        document = fill(
            "<text:p>{#each légumes as légume}</text:p>"
            "<text:p>{légume}</text:p>"
            "<text:p>{/each}</text:p>",
            {"légumes": ["Radis", "Pâtes"]},
        )
        assert paragraph_texts(document) == ["Radis", "Pâtes"]

    def test_inline_loop(self):
        document = fill(
            "<text:p>Les nombres : {#each nombres as n}{n} {/each} !!</text:p>",
            {"nombres": [1, 1, 2, 3, 5, 8, 13, 21]},
        )
        assert paragraph_texts(document) == ["Les nombres : 1 1 2 3 5 8 13 21  !!"]

    def test_empty_loop_removes_block(self):
        document = fill(
            "<text:p>avant</text:p>"
            "<text:p>{#each vide as x}</text:p>"
            "<text:p>{x}</text:p>"
            "<text:p>{/each}</text:p>"
            "<text:p>après</text:p>",
            {"vide": []},
        )
        assert paragraph_texts(document) == ["avant", "après"]

    def test_missing_iterable_is_empty(self):
        document = fill("<text:p>[{#each absent as x}{x}{/each}]</text:p>", {})
        assert paragraph_texts(document) == ["[]"]

    def test_single_item(self):
        document = fill("<text:p>[{#each l as x}{x}{/each}]</text:p>", {"l": ["seul"]})
        assert paragraph_texts(document) == ["[seul]"]

    def test_text_sharing_marker_paragraphs(self):
        document = fill(
            "<text:p>{#each légumes as l}{l.nom}, </text:p>"
            "<text:p>{/each} en {saison}</text:p>",
            {
                "saison": "Printemps",
                "légumes": [{"nom": "Asperge"}, {"nom": "Betterave"}, {"nom": "Blette"}],
            },
        )
        assert paragraph_texts(document) == ["Asperge, ", "Betterave, ", "Blette, ", " en Printemps"]

    def test_leading_text_kept_by_first_iteration_only(self):
        document = fill(
            "<text:p>Titre {#each l as x}</text:p>"
            "<text:p>{x}</text:p>"
            "<text:p>{/each}</text:p>",
            {"l": ["a", "b"]},
        )
        assert paragraph_texts(document) == ["Titre ", "a", "b"]

    def test_nested_loops(self):
        document = fill(
            "<text:p>{#each groupes as g}</text:p>"
            "<text:p>{g.nom}</text:p>"
            "<text:p>{#each g.éléments as e}</text:p>"
            "<text:p>- {e}</text:p>"
            "<text:p>{/each}</text:p>"
            "<text:p>{/each}</text:p>",
            {"groupes": [
                {"nom": "A", "éléments": [1, 2]},
                {"nom": "B", "éléments": []},
                {"nom": "C", "éléments": [3]},
            ]},
        )
        assert paragraph_texts(document) == ["A", "- 1", "- 2", "B", "C", "- 3"]

    def test_inner_loop_sees_outer_item(self):
        document = fill(
            "<text:p>{#each lignes as ligne}{#each ligne.cases as c}{ligne.n}{c}{/each};{/each}</text:p>",
            {"lignes": [{"n": "a", "cases": [1, 2]}, {"n": "b", "cases": [3]}]},
        )
        assert paragraph_texts(document) == ["a1a2;b3;"]

    def test_nested_empty_loop_in_paragraphs(self):
        document = fill(
            "<text:p>{#each l as x}</text:p>"
            "<text:p>{#each x.vide as y}</text:p>"
            "<text:p>{y}</text:p>"
            "<text:p>{/each}</text:p>"
            "<text:p>{/each}</text:p>",
            {"l": [{"vide": []}]},
        )
        assert paragraph_texts(document) == []

    def test_table_rows(self):
        document = fill(
            "<table:table>"
            "<table:table-row><table:table-cell><text:p>Nom</text:p></table:table-cell></table:table-row>"
            "<table:table-row><table:table-cell><text:p>{#each personnes as p}</text:p></table:table-cell></table:table-row>"
            "<table:table-row><table:table-cell><text:p>{p}</text:p></table:table-cell></table:table-row>"
            "<table:table-row><table:table-cell><text:p>{/each}</text:p></table:table-cell></table:table-row>"
            "</table:table>",
            {"personnes": ["Ada", "Alan"]},
        )
        rows = office_text(document).getElementsByTagName("table:table-row")
        assert len(rows) == 3
        assert paragraph_texts(document) == ["Nom", "Ada", "Alan"]

    def test_list_items(self):
        document = fill(
            "<text:list>"
            "<text:list-item><text:p>{#each l as x}{x}{/each}</text:p></text:list-item>"
            "</text:list>",
            {"l": ["un", "deux"]},
        )
        assert paragraph_texts(document) == ["undeux"]

    def test_branch_attributes_use_enclosing_scope(self):
        document = fill(
            '<text:p text:style-name="P{n}">Titre {#each l as n}</text:p>'
            '<text:p text:style-name="S{n}">{n}</text:p>'
            "<text:p>{/each}</text:p>",
            {"n": 0, "l": [1, 2]},
        )
        paragraphs = office_text(document).childNodes

        assert [p.getAttribute("text:style-name") for p in paragraphs] == ["P0", "S1", "S2"]
        assert paragraph_texts(document) == ["Titre ", "1", "2"]

    def test_loop_variable_does_not_leak_after_block(self):
        document = fill(
            "<text:p>{#each xs as x}</text:p>"
            "<text:p>[{x}]</text:p>"
            "<text:p>{/each} total {x}</text:p>",
            {"xs": [1, 2], "x": "OUT"},
        )
        assert paragraph_texts(document) == ["[1]", "[2]", " total OUT"]

    def test_adjacent_loops_in_one_paragraph(self):
        document = fill(
            "<text:p>{#each xs as x}</text:p>"
            "<text:p>{x}</text:p>"
            "<text:p>{/each}{#each ys as y}</text:p>"
            "<text:p>{y}</text:p>"
            "<text:p>{/each}</text:p>",
            {"xs": [1, 2], "ys": ["a"]},
        )
        assert paragraph_texts(document) == ["1", "2", "a"]
