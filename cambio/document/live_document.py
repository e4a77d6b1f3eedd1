"""
Documento HTML vivo sobre BeautifulSoup.
Centraliza todas as escritas na árvore e notifica observadores de mutação,
além de manter ouvintes de eventos, viewport e caixas de layout.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, Tag

from config.logging_config import LoggerMixin
from cambio.core.types import MutationType


MutationCallback = Callable[[list["MutationRecord"]], None]
EventHandler = Callable[["DocumentEvent"], None]


# =============================================================================
# REGISTROS E GEOMETRIA
# =============================================================================

@dataclass
class MutationRecord:
    """Uma mutação aplicada à árvore."""

    type: MutationType
    target: PageElement
    added_nodes: list[PageElement] = field(default_factory=list)
    removed_nodes: list[PageElement] = field(default_factory=list)
    attribute_name: Optional[str] = None
    old_value: Optional[str] = None


@dataclass
class DocumentEvent:
    """Evento despachado para um elemento (ex: mouseenter)."""

    type: str
    target: Tag


@dataclass
class BoundingBox:
    """Retângulo do elemento relativo à viewport (px)."""

    top: float = 0.0
    left: float = 0.0
    width: float = 0.0
    height: float = 0.0


@dataclass
class Viewport:
    """Deslocamento de rolagem atual (px)."""

    scroll_x: float = 0.0
    scroll_y: float = 0.0


@dataclass
class _Observation:
    callback: MutationCallback
    target: PageElement
    child_list: bool
    character_data: bool
    attributes: bool
    subtree: bool
    active: bool = True


class MutationSubscription:
    """Handle de uma observação registrada; desconectar é idempotente."""

    def __init__(self, document: "LiveDocument", observation: _Observation):
        self._document = document
        self._observation = observation

    @property
    def active(self) -> bool:
        return self._observation.active

    def disconnect(self) -> None:
        """Para de receber mutações."""
        if self._observation.active:
            self._observation.active = False
            self._document._observations.remove(self._observation)


# =============================================================================
# DOCUMENTO
# =============================================================================

class LiveDocument(LoggerMixin):
    """
    Documento mutável observável.

    Toda escrita passa por aqui para que observadores recebam registros
    equivalentes aos de um MutationObserver: childList, characterData
    e attributes. Identidade de nós é sempre por referência (id), pois
    Tag.__eq__ e Tag.__hash__ do bs4 são estruturais.
    """

    def __init__(self, html: str = "", parser: str = "html.parser"):
        """
        Inicializa o documento.

        Args:
            html: Marcação inicial
            parser: Parser do BeautifulSoup
        """
        self.parser = parser
        self.soup = BeautifulSoup(html, parser)
        self.viewport = Viewport()
        self._observations: list[_Observation] = []
        self._listeners: dict[int, tuple[Tag, dict[str, list[EventHandler]]]] = {}
        self._layout: dict[int, tuple[Tag, BoundingBox]] = {}

    @classmethod
    def from_file(cls, path, encoding: str = "utf-8") -> "LiveDocument":
        """Carrega documento de um arquivo HTML."""
        with open(path, encoding=encoding) as fp:
            document = cls(fp.read())
        document.logger.debug("Documento carregado", path=str(path))
        return document

    # ACESSO

    @property
    def body(self) -> Optional[Tag]:
        return self.soup.body

    @property
    def head(self) -> Optional[Tag]:
        return self.soup.head

    @property
    def root(self) -> Tag:
        """Raiz de conteúdo: <body> ou a árvore inteira."""
        return self.soup.body or self.soup

    def contains(self, node: PageElement) -> bool:
        """Indica se o nó ainda está ligado a este documento."""
        if node is self.soup:
            return True
        return any(parent is self.soup for parent in node.parents)

    def get_element_by_id(self, element_id: str) -> Optional[Tag]:
        return self.soup.find(id=element_id)

    def select(self, selector: str) -> list[Tag]:
        return self.soup.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    def to_html(self) -> str:
        return self.soup.decode()

    # CRIAÇÃO

    def create_element(
        self,
        name: str,
        attrs: Optional[dict[str, Any]] = None,
        text: Optional[str] = None,
    ) -> Tag:
        """Cria elemento desanexado (sem notificar)."""
        tag = self.soup.new_tag(name, attrs=attrs or {})
        if text is not None:
            tag.append(NavigableString(text))
        return tag

    def parse_fragment(self, html: str) -> list[PageElement]:
        """Interpreta um fragmento HTML em nós desanexados."""
        fragment = BeautifulSoup(html, self.parser)
        return [node.extract() for node in list(fragment.contents)]

    # MUTAÇÕES ESTRUTURAIS

    def append_child(self, parent: Tag, node: PageElement) -> PageElement:
        """Anexa um nó ao final de parent."""
        parent.append(node)
        self._notify(MutationRecord(
            type=MutationType.CHILD_LIST,
            target=parent,
            added_nodes=[node],
        ))
        return node

    def insert_child(self, parent: Tag, index: int, node: PageElement) -> PageElement:
        """Insere um nó na posição index de parent."""
        parent.insert(index, node)
        self._notify(MutationRecord(
            type=MutationType.CHILD_LIST,
            target=parent,
            added_nodes=[node],
        ))
        return node

    def append_html(self, parent: Tag, html: str) -> list[PageElement]:
        """Anexa um fragmento HTML; um único registro com todos os nós."""
        nodes = self.parse_fragment(html)
        for node in nodes:
            parent.append(node)
        if nodes:
            self._notify(MutationRecord(
                type=MutationType.CHILD_LIST,
                target=parent,
                added_nodes=nodes,
            ))
        return nodes

    def remove(self, node: PageElement) -> None:
        """Remove um nó da árvore."""
        parent = node.parent
        node.extract()
        if parent is not None:
            self._notify(MutationRecord(
                type=MutationType.CHILD_LIST,
                target=parent,
                removed_nodes=[node],
            ))

    def set_text(self, element: Tag, text: str) -> NavigableString:
        """Substitui todo o conteúdo do elemento por um nó de texto."""
        removed = list(element.contents)
        element.clear()
        new_node = NavigableString(text)
        element.append(new_node)
        self._notify(MutationRecord(
            type=MutationType.CHILD_LIST,
            target=element,
            added_nodes=[new_node],
            removed_nodes=removed,
        ))
        return new_node

    def replace_text(self, text_node: NavigableString, text: str) -> NavigableString:
        """Altera o conteúdo de um nó de texto (characterData)."""
        old_value = str(text_node)
        new_node = NavigableString(text)
        text_node.replace_with(new_node)
        self._notify(MutationRecord(
            type=MutationType.CHARACTER_DATA,
            target=new_node,
            old_value=old_value,
        ))
        return new_node

    # ATRIBUTOS

    def set_attribute(self, element: Tag, name: str, value: str) -> None:
        old_value = element.get(name)
        element[name] = value
        self._notify_attribute(element, name, old_value)

    def remove_attribute(self, element: Tag, name: str) -> None:
        if not element.has_attr(name):
            return
        old_value = element.get(name)
        del element[name]
        self._notify_attribute(element, name, old_value)

    def add_class(self, element: Tag, class_name: str) -> None:
        classes = self.classes_of(element)
        if class_name in classes:
            return
        old_value = " ".join(classes)
        element["class"] = [*classes, class_name]
        self._notify_attribute(element, "class", old_value)

    def remove_class(self, element: Tag, class_name: str) -> None:
        classes = self.classes_of(element)
        if class_name not in classes:
            return
        old_value = " ".join(classes)
        classes.remove(class_name)
        if classes:
            element["class"] = classes
        else:
            del element["class"]
        self._notify_attribute(element, "class", old_value)

    def has_class(self, element: Tag, class_name: str) -> bool:
        return class_name in self.classes_of(element)

    @staticmethod
    def classes_of(element: Tag) -> list[str]:
        """Classes do elemento; html.parser devolve lista, new_tag pode guardar string."""
        value = element.get("class")
        if not value:
            return []
        if isinstance(value, str):
            return value.split()
        return list(value)

    def _notify_attribute(self, element: Tag, name: str, old_value: Any) -> None:
        if isinstance(old_value, list):
            old_value = " ".join(old_value)
        self._notify(MutationRecord(
            type=MutationType.ATTRIBUTES,
            target=element,
            attribute_name=name,
            old_value=old_value,
        ))

    # OBSERVAÇÃO

    def observe(
        self,
        callback: MutationCallback,
        target: Optional[PageElement] = None,
        *,
        child_list: bool = True,
        character_data: bool = False,
        attributes: bool = False,
        subtree: bool = True,
    ) -> MutationSubscription:
        """
        Registra um observador de mutações.

        Args:
            callback: Recebe a lista de registros de cada mutação
            target: Nó observado (None = raiz de conteúdo)
            child_list: Inserções/remoções de filhos
            character_data: Alterações de texto
            attributes: Alterações de atributos
            subtree: Inclui descendentes de target

        Returns:
            Handle para desconectar
        """
        observation = _Observation(
            callback=callback,
            target=target if target is not None else self.root,
            child_list=child_list,
            character_data=character_data,
            attributes=attributes,
            subtree=subtree,
        )
        self._observations.append(observation)
        return MutationSubscription(self, observation)

    def _notify(self, record: MutationRecord) -> None:
        # Cópia: callbacks podem desconectar durante a entrega
        for observation in list(self._observations):
            if observation.active and self._wants(observation, record):
                observation.callback([record])

    @staticmethod
    def _wants(observation: _Observation, record: MutationRecord) -> bool:
        if record.type is MutationType.CHILD_LIST and not observation.child_list:
            return False
        if record.type is MutationType.CHARACTER_DATA and not observation.character_data:
            return False
        if record.type is MutationType.ATTRIBUTES and not observation.attributes:
            return False

        target = record.target
        if target is observation.target:
            return True
        if not observation.subtree:
            return False
        return any(parent is observation.target for parent in target.parents)

    # EVENTOS

    def _handlers_for(self, element: Tag) -> dict[str, list[EventHandler]]:
        entry = self._listeners.get(id(element))
        if entry is None or entry[0] is not element:
            return {}
        return entry[1]

    def add_event_listener(self, element: Tag, event_type: str, handler: EventHandler) -> None:
        entry = self._listeners.get(id(element))
        if entry is None or entry[0] is not element:
            # O elemento fica referenciado para que o id não seja reutilizado
            entry = (element, {})
            self._listeners[id(element)] = entry
        entry[1].setdefault(event_type, []).append(handler)

    def remove_event_listener(self, element: Tag, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers_for(element).get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, element: Tag, event_type: Optional[str] = None) -> int:
        by_type = self._handlers_for(element)
        if event_type is not None:
            return len(by_type.get(event_type, []))
        return sum(len(handlers) for handlers in by_type.values())

    def dispatch_event(self, element: Tag, event_type: str) -> int:
        """
        Despacha um evento para os ouvintes do elemento.

        Returns:
            Quantidade de ouvintes chamados
        """
        handlers = list(self._handlers_for(element).get(event_type, []))
        event = DocumentEvent(type=event_type, target=element)
        for handler in handlers:
            handler(event)
        return len(handlers)

    # LAYOUT

    def set_bounding_box(self, element: Tag, box: BoundingBox) -> None:
        self._layout[id(element)] = (element, box)

    def get_bounding_box(self, element: Tag) -> BoundingBox:
        """Caixa atual do elemento (zerada se nunca informada)."""
        entry = self._layout.get(id(element))
        if entry is None or entry[0] is not element:
            return BoundingBox()
        return entry[1]

    def scroll_to(self, x: float, y: float) -> None:
        self.viewport.scroll_x = x
        self.viewport.scroll_y = y
