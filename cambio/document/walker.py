"""
Percurso de nós de texto sob uma raiz.
Sequência preguiçosa e reiniciável, em ordem de documento,
que pula subárvores excluídas.
"""

from typing import Iterable, Iterator, Optional

from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from cambio.core.constants import IGNORE_ATTRIBUTE, SKIPPED_TAGS


def is_text_node(node: PageElement) -> bool:
    """Nó de texto comum (exclui comentários, doctype, CDATA...)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def is_excluded_element(
    element: Tag,
    skip_tags: Iterable[str] = SKIPPED_TAGS,
    ignore_attribute: Optional[str] = IGNORE_ATTRIBUTE,
) -> bool:
    """Elemento cuja subárvore nunca é varrida."""
    if element.name and element.name.lower() in skip_tags:
        return True
    return bool(ignore_attribute and element.has_attr(ignore_attribute))


class TextNodeWalker:
    """
    Itera os nós de texto de uma raiz.

    Cada chamada a iter() recomeça do início; a pilha guarda cópias das
    listas de filhos, então marcar atributos durante o percurso é seguro.
    """

    def __init__(
        self,
        root: PageElement,
        skip_tags: Iterable[str] = SKIPPED_TAGS,
        ignore_attribute: Optional[str] = IGNORE_ATTRIBUTE,
    ):
        self.root = root
        self.skip_tags = frozenset(tag.lower() for tag in skip_tags)
        self.ignore_attribute = ignore_attribute

    def __iter__(self) -> Iterator[NavigableString]:
        return self._walk()

    def _walk(self) -> Iterator[NavigableString]:
        stack: list[PageElement] = [self.root]
        while stack:
            node = stack.pop()
            if isinstance(node, Tag):
                if is_excluded_element(node, self.skip_tags, self.ignore_attribute):
                    continue
                stack.extend(reversed(node.contents))
            elif is_text_node(node):
                yield node
