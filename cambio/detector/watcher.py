"""
Observador de mudanças de conteúdo.
Acumula elementos afetados por inserções e alterações de texto e os entrega
em lotes, no máximo um flush agendado por janela de throttle.
"""

import asyncio
from typing import Callable, Optional

from bs4.element import PageElement, Tag

from config.logging_config import LoggerMixin
from config.settings import get_settings
from cambio.core.constants import IGNORE_ATTRIBUTE, SKIPPED_TAGS
from cambio.core.exceptions import DetectionError
from cambio.core.types import MutationType
from cambio.document.live_document import LiveDocument, MutationRecord, MutationSubscription


BatchCallback = Callable[[list[Tag]], None]


class ContentChangeWatcher(LoggerMixin):
    """
    Watcher de mutações com throttle.

    O conjunto pendente é indexado por id() (identidade do elemento) e
    preserva a ordem de chegada; é limpo de uma vez a cada flush.
    """

    def __init__(
        self,
        document: LiveDocument,
        on_batch: BatchCallback,
        throttle_seconds: Optional[float] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Inicializa o watcher.

        Args:
            document: Documento observado
            on_batch: Recebe a lista de elementos a reescanear
            throttle_seconds: Janela de throttle (None = settings)
            loop: Event loop dos timers (None = loop em execução no start)
        """
        self.document = document
        self._on_batch = on_batch
        if throttle_seconds is None:
            throttle_seconds = get_settings().throttle_seconds
        self.throttle_seconds = throttle_seconds

        self._injected_loop = loop
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._subscription: Optional[MutationSubscription] = None
        self._pending: dict[int, Tag] = {}
        self._flush_handle: Optional[asyncio.TimerHandle] = None

    @property
    def is_running(self) -> bool:
        return self._subscription is not None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def flush_scheduled(self) -> bool:
        return self._flush_handle is not None

    def resolve_loop(self) -> asyncio.AbstractEventLoop:
        """
        Loop usado pelos timers: o injetado ou o loop em execução.

        Raises:
            DetectionError: Nenhum loop injetado e nenhum em execução
        """
        if self._injected_loop is not None:
            return self._injected_loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as e:
            raise DetectionError("Nenhum event loop em execução", cause=e)

    def start(self) -> None:
        """Arma a observação do documento (idempotente)."""
        if self._subscription is not None:
            return

        self._loop = self.resolve_loop()

        self._subscription = self.document.observe(
            self._handle_mutations,
            self.document.root,
            child_list=True,
            character_data=True,
            subtree=True,
        )
        self.logger.info(
            "Observação de conteúdo iniciada",
            throttle_ms=round(self.throttle_seconds * 1000),
        )

    def stop(self) -> None:
        """Desarma observação, cancela flush agendado e esvazia pendências."""
        if self._subscription is not None:
            self._subscription.disconnect()
            self._subscription = None
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None
        self._pending.clear()
        self._loop = None

    def flush_now(self) -> int:
        """
        Entrega imediatamente o que estiver pendente.

        Returns:
            Quantidade de elementos entregues
        """
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None
        return self._process_pending()

    # REAÇÃO A MUTAÇÕES

    def _handle_mutations(self, records: list[MutationRecord]) -> None:
        has_new_content = False

        for record in records:
            if record.type is MutationType.CHILD_LIST:
                for node in record.added_nodes:
                    if isinstance(node, Tag) and not self._should_skip(node):
                        self._pending[id(node)] = node
                        has_new_content = True

            elif record.type is MutationType.CHARACTER_DATA:
                parent = getattr(record.target, "parent", None)
                if isinstance(parent, Tag) and not self._should_skip(parent):
                    self._pending[id(parent)] = parent
                    has_new_content = True

        if has_new_content:
            self._schedule_processing()

    @staticmethod
    def _should_skip(element: PageElement) -> bool:
        """Scripts, estilos, iframes e a UI injetada pelo próprio sistema."""
        name = (element.name or "").lower()
        if name in SKIPPED_TAGS:
            return True
        if element.has_attr(IGNORE_ATTRIBUTE):
            return True
        return any(
            parent.has_attr(IGNORE_ATTRIBUTE)
            for parent in element.parents
            if isinstance(parent, Tag)
        )

    # THROTTLE

    def _schedule_processing(self) -> None:
        # Rajadas se juntam ao próximo flush; nunca o antecipam
        if self._flush_handle is not None:
            return
        self._flush_handle = self._loop.call_later(self.throttle_seconds, self._on_timer)

    def _on_timer(self) -> None:
        self._flush_handle = None
        self._process_pending()

    def _process_pending(self) -> int:
        if not self._pending:
            return 0

        elements = list(self._pending.values())
        self._pending.clear()

        self.logger.debug("Processando elementos dinâmicos", total=len(elements))
        self._on_batch(elements)
        return len(elements)
