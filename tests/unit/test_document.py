"""
Testes unitários para o documento vivo e o percurso de texto.
"""

import pytest
from bs4.element import NavigableString

from cambio.core.types import MutationType
from cambio.document.live_document import BoundingBox, LiveDocument
from cambio.document.walker import TextNodeWalker, is_text_node


class TestLiveDocument:
    """Testes para LiveDocument."""

    @pytest.fixture
    def document(self) -> LiveDocument:
        return LiveDocument("<html><body><div id='box'><p>a</p></div></body></html>")

    @pytest.fixture
    def records(self) -> list:
        return []

    def test_raiz_e_body(self, document):
        assert document.root is document.body

    def test_raiz_sem_body(self):
        document = LiveDocument("<p>x</p>")
        assert document.root is document.soup

    def test_append_html_notifica_child_list(self, document, records):
        document.observe(records.extend)
        box = document.select_one("#box")

        nodes = document.append_html(box, "<span>1</span><span>2</span>")

        assert len(records) == 1
        assert records[0].type is MutationType.CHILD_LIST
        assert records[0].target is box
        assert records[0].added_nodes == nodes
        assert len(nodes) == 2

    def test_character_data_somente_quando_pedido(self, document, records):
        document.observe(records.extend)
        text = document.select_one("p").contents[0]

        document.replace_text(text, "b")

        assert records == []
        assert document.select_one("p").get_text() == "b"

    def test_character_data_registra_valor_antigo(self, document, records):
        document.observe(records.extend, character_data=True)
        text = document.select_one("p").contents[0]

        new_node = document.replace_text(text, "b")

        assert records[0].type is MutationType.CHARACTER_DATA
        assert records[0].target is new_node
        assert records[0].old_value == "a"

    def test_atributos_somente_quando_pedido(self, document, records):
        document.observe(records.extend)
        document.set_attribute(document.select_one("p"), "data-x", "1")
        assert records == []

        document.observe(records.extend, attributes=True)
        document.set_attribute(document.select_one("p"), "data-x", "2")
        assert records[0].attribute_name == "data-x"
        assert records[0].old_value == "1"

    def test_remove_attribute(self, document, records):
        paragraph = document.select_one("p")
        document.set_attribute(paragraph, "data-x", "1")
        document.observe(records.extend, attributes=True)

        document.remove_attribute(paragraph, "data-x")
        document.remove_attribute(paragraph, "data-x")

        assert not paragraph.has_attr("data-x")
        assert len(records) == 1

    def test_sem_subtree_ignora_descendentes(self, document, records):
        document.observe(records.extend, document.body, subtree=False)

        document.append_html(document.select_one("#box"), "<i>x</i>")
        assert records == []

        document.append_html(document.body, "<i>y</i>")
        assert len(records) == 1

    def test_disconnect_idempotente(self, document, records):
        subscription = document.observe(records.extend)

        subscription.disconnect()
        subscription.disconnect()
        document.append_html(document.body, "<i>x</i>")

        assert not subscription.active
        assert records == []

    def test_remove(self, document, records):
        document.observe(records.extend)
        paragraph = document.select_one("p")

        document.remove(paragraph)

        assert not document.contains(paragraph)
        assert records[0].removed_nodes == [paragraph]

    def test_set_text(self, document):
        box = document.select_one("#box")

        document.set_text(box, "novo")

        assert box.get_text() == "novo"
        assert document.select_one("p") is None

    def test_classes(self, document):
        paragraph = document.select_one("p")

        document.add_class(paragraph, "a")
        document.add_class(paragraph, "a")
        document.add_class(paragraph, "b")
        assert LiveDocument.classes_of(paragraph) == ["a", "b"]

        document.remove_class(paragraph, "a")
        document.remove_class(paragraph, "b")
        assert not paragraph.has_attr("class")

    def test_classes_em_string(self, document):
        element = document.create_element("div", {"class": "x y"})

        document.add_class(element, "z")

        assert document.has_class(element, "x")
        assert document.has_class(element, "z")

    def test_eventos(self, document):
        paragraph = document.select_one("p")
        received = []
        handler = received.append

        document.add_event_listener(paragraph, "mouseenter", handler)
        assert document.dispatch_event(paragraph, "mouseenter") == 1
        assert received[0].target is paragraph

        document.remove_event_listener(paragraph, "mouseenter", handler)
        assert document.dispatch_event(paragraph, "mouseenter") == 0
        assert document.listener_count(paragraph) == 0

    def test_eventos_por_identidade(self, document):
        """Elementos estruturalmente iguais não compartilham ouvintes."""
        document.append_html(document.body, "<p>a</p>")
        first, second = document.select("p")
        assert first == second

        document.add_event_listener(first, "click", lambda event: None)

        assert document.listener_count(first) == 1
        assert document.listener_count(second) == 0

    def test_layout(self, document):
        paragraph = document.select_one("p")

        assert document.get_bounding_box(paragraph) == BoundingBox()

        document.set_bounding_box(paragraph, BoundingBox(top=10, left=20))
        document.scroll_to(5, 50)

        assert document.get_bounding_box(paragraph).top == 10
        assert document.viewport.scroll_y == 50

    def test_from_file(self, product_file):
        document = LiveDocument.from_file(product_file)
        assert document.select_one("p.price").get_text() == "$19.99"


class TestTextNodeWalker:
    """Testes para TextNodeWalker."""

    def test_ordem_de_documento(self):
        document = LiveDocument("<div><p>a</p>b<span>c</span></div>")

        texts = [str(node) for node in TextNodeWalker(document.root)]

        assert texts == ["a", "b", "c"]

    def test_pula_subarvores_excluidas(self):
        document = LiveDocument(
            "<div>x<script>s</script><style>t</style><noscript>n</noscript>"
            "<div data-cambio-ignore='true'><b>i</b></div>y</div>"
        )

        texts = [str(node) for node in TextNodeWalker(document.root)]

        assert texts == ["x", "y"]

    def test_ignora_comentarios(self):
        document = LiveDocument("<div><!-- $5 -->x</div>")

        nodes = list(TextNodeWalker(document.root))

        assert [str(node) for node in nodes] == ["x"]
        assert all(is_text_node(node) for node in nodes)

    def test_raiz_excluida(self):
        document = LiveDocument("<script>var a = 1;</script>")

        assert list(TextNodeWalker(document.select_one("script"))) == []

    def test_reiniciavel(self):
        document = LiveDocument("<p>a</p><p>b</p>")
        walker = TextNodeWalker(document.root)

        assert list(walker) == list(walker)
        assert len(list(walker)) == 2

    def test_no_de_texto_como_raiz(self):
        text = NavigableString("$5")
        assert list(TextNodeWalker(text)) == [text]
