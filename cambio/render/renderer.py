"""
Motor de apresentação das conversões.
Modo substituição (reescreve o texto do elemento) e modo badge
(destaque + badge flutuante no hover).
"""

import asyncio
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from bs4.element import Tag

from config.logging_config import LoggerMixin
from config.settings import get_settings
from cambio.core.constants import (
    BADGE_CLASS,
    BADGE_OFFSET_PX,
    CONVERTED_ATTRIBUTE,
    HIGHLIGHT_CLASS,
    IGNORE_ATTRIBUTE,
    ORIGINAL_TEXT_ATTRIBUTE,
    RENDER_DELIMITER,
    VISIBLE_CLASS,
)
from cambio.core.exceptions import RenderError
from cambio.core.models import ConvertedPrice, PriceElement
from cambio.core.types import RenderMode
from cambio.document.live_document import DocumentEvent, LiveDocument
from cambio.render.styles import ensure_styles_injected


@dataclass(eq=False)
class _HoverBinding:
    """Ouvintes de hover de um elemento; o texto é atualizado a cada render."""

    element: Tag
    text: str
    on_enter: Optional[Callable[[DocumentEvent], None]] = None
    on_leave: Optional[Callable[[DocumentEvent], None]] = None


def _px(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text}px"


class PresentationEngine(LoggerMixin):
    """
    Renderiza conversões em um documento vivo.

    No modo badge existe no máximo um badge no documento por vez:
    mostrar um novo remove imediatamente o ativo e o que estiver sumindo.
    """

    def __init__(
        self,
        document: LiveDocument,
        fade_seconds: Optional[float] = None,
        delimiter: str = RENDER_DELIMITER,
    ):
        """
        Inicializa o motor e injeta a folha de estilos.

        Args:
            document: Documento alvo
            fade_seconds: Atraso de remoção do badge (None = settings)
            delimiter: Separador entre conversões
        """
        self.document = document
        if fade_seconds is None:
            fade_seconds = get_settings().badge_fade_seconds
        self.fade_seconds = fade_seconds
        self.delimiter = delimiter

        self._active_badge: Optional[Tag] = None
        self._fading_badge: Optional[Tag] = None
        self._fade_handle: Optional[asyncio.TimerHandle] = None
        self._bindings: dict[int, _HoverBinding] = {}

        ensure_styles_injected(document)

    @property
    def active_badge(self) -> Optional[Tag]:
        return self._active_badge

    def render(
        self,
        price_element: PriceElement,
        conversions: Sequence[ConvertedPrice],
        mode: Union[RenderMode, str] = RenderMode.REPLACE,
    ) -> bool:
        """
        Exibe as conversões de um elemento.

        Args:
            price_element: Elemento detectado
            conversions: Conversões formatadas (vazio = nada a fazer)
            mode: RenderMode ou seu valor textual

        Returns:
            True se o documento foi alterado

        Raises:
            RenderError: Modo desconhecido
        """
        try:
            mode = RenderMode(mode)
        except ValueError as e:
            raise RenderError(
                f"Modo de exibição inválido: {mode}",
                mode=str(mode),
                cause=e,
            )

        if not conversions:
            return False

        text = self.delimiter.join(c.formatted for c in conversions)

        if mode is RenderMode.REPLACE:
            self._render_replacement(price_element, text)
        else:
            self._render_badge(price_element, text)

        self.logger.debug(
            "Conversão renderizada",
            mode=mode.value,
            tag=price_element.tag_name,
            text=text,
        )
        return True

    # MODO SUBSTITUIÇÃO

    def _render_replacement(self, price_element: PriceElement, text: str) -> None:
        element = price_element.element

        # O texto original só é gravado uma vez; re-renders não o sobrescrevem
        if not element.get(ORIGINAL_TEXT_ATTRIBUTE):
            self.document.set_attribute(
                element, ORIGINAL_TEXT_ATTRIBUTE, price_element.original_text
            )

        # Substitui o texto inteiro do elemento
        self.document.set_text(element, text)
        self.document.set_attribute(element, CONVERTED_ATTRIBUTE, "true")

    # MODO BADGE

    def _render_badge(self, price_element: PriceElement, text: str) -> None:
        element = price_element.element
        self.document.add_class(element, HIGHLIGHT_CLASS)

        binding = self._bindings.get(id(element))
        if binding is not None and binding.element is element:
            binding.text = text
            return

        binding = _HoverBinding(element=element, text=text)
        binding.on_enter = lambda event: self.show_badge(event.target, binding.text)
        binding.on_leave = lambda event: self.hide_badge()

        self.document.add_event_listener(element, "mouseenter", binding.on_enter)
        self.document.add_event_listener(element, "mouseleave", binding.on_leave)
        self._bindings[id(element)] = binding

    def show_badge(self, target: Tag, text: str) -> Tag:
        """
        Cria o badge acima do elemento e o torna visível.

        Returns:
            O novo badge
        """
        self._discard_badges()

        box = self.document.get_bounding_box(target)
        viewport = self.document.viewport
        top = box.top + viewport.scroll_y - BADGE_OFFSET_PX
        left = box.left + viewport.scroll_x

        badge = self.document.create_element(
            "div",
            {
                "class": BADGE_CLASS,
                IGNORE_ATTRIBUTE: "true",
                "style": f"top: {_px(top)}; left: {_px(left)}",
            },
            text,
        )
        self.document.append_child(self.document.root, badge)
        self._active_badge = badge
        self.document.add_class(badge, VISIBLE_CLASS)
        return badge

    def hide_badge(self) -> None:
        """Esconde o badge ativo e o remove após o fade."""
        badge = self._active_badge
        if badge is None:
            return
        self._active_badge = None
        self.document.remove_class(badge, VISIBLE_CLASS)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._remove_badge(badge)
            return

        self._cancel_fade()
        if self._fading_badge is not None:
            self._remove_badge(self._fading_badge)
        self._fading_badge = badge
        self._fade_handle = loop.call_later(self.fade_seconds, self._finish_fade)

    def _finish_fade(self) -> None:
        self._fade_handle = None
        badge, self._fading_badge = self._fading_badge, None
        if badge is not None:
            self._remove_badge(badge)

    def _cancel_fade(self) -> None:
        if self._fade_handle is not None:
            self._fade_handle.cancel()
            self._fade_handle = None

    def _discard_badges(self) -> None:
        self._cancel_fade()
        for badge in (self._fading_badge, self._active_badge):
            if badge is not None:
                self._remove_badge(badge)
        self._fading_badge = None
        self._active_badge = None

    def _remove_badge(self, badge: Tag) -> None:
        if self.document.contains(badge):
            self.document.remove(badge)

    # ENCERRAMENTO

    def teardown(self) -> None:
        """Remove badges, cancela o fade e desliga os ouvintes de hover."""
        self._discard_badges()
        for binding in self._bindings.values():
            self.document.remove_event_listener(binding.element, "mouseenter", binding.on_enter)
            self.document.remove_event_listener(binding.element, "mouseleave", binding.on_leave)
        unbound = len(self._bindings)
        self._bindings.clear()
        self.logger.debug("Renderizador encerrado", unbound=unbound)
