"""
Motor de detecção de preços.
Faz a varredura completa inicial, arma o watcher e processa os lotes
incrementais, emitindo um evento de descoberta por varredura.
"""

from typing import Callable, Iterable, Optional

from bs4.element import Tag

from config.logging_config import LoggerMixin
from cambio.core.constants import DETECTED_ATTRIBUTE
from cambio.core.exceptions import DetectionInvariantError
from cambio.core.models import PriceElement
from cambio.core.types import DetectorState
from cambio.detector.parser import AmountParser
from cambio.detector.watcher import ContentChangeWatcher
from cambio.document.live_document import LiveDocument
from cambio.document.walker import TextNodeWalker


DiscoveryCallback = Callable[[list[PriceElement]], None]


class PriceDetector(LoggerMixin):
    """
    Orquestra parser e watcher sobre um documento vivo.

    Fluxo: start() -> varredura completa -> watcher armado -> lotes
    incrementais. Cada elemento vira no máximo um PriceElement.
    """

    def __init__(
        self,
        document: LiveDocument,
        parser: Optional[AmountParser] = None,
        throttle_seconds: Optional[float] = None,
    ):
        """
        Inicializa o detector.

        Args:
            document: Documento a varrer
            parser: Parser de valores (None = tabela padrão)
            throttle_seconds: Janela do watcher (None = settings)
        """
        self.document = document
        self.parser = parser or AmountParser()
        self.watcher = ContentChangeWatcher(
            document,
            self.scan,
            throttle_seconds=throttle_seconds,
        )

        self._state = DetectorState.IDLE
        self._deferred: list[list[Tag]] = []
        # id(elemento) -> PriceElement; o PriceElement mantém a referência viva
        self._tracked: dict[int, PriceElement] = {}
        self._on_prices_found: Optional[DiscoveryCallback] = None

    @property
    def state(self) -> DetectorState:
        return self._state

    @property
    def tracked_count(self) -> int:
        return len(self._tracked)

    def is_tracked(self, element: Tag) -> bool:
        return self.get_price_element(element) is not None

    def get_price_element(self, element: Tag) -> Optional[PriceElement]:
        price_element = self._tracked.get(id(element))
        if price_element is not None and price_element.element is element:
            return price_element
        return None

    def on_prices_found(self, callback: DiscoveryCallback) -> None:
        """Registra o ouvinte de descobertas (o último registro vence)."""
        self._on_prices_found = callback

    def start(self) -> None:
        """
        Varredura completa do documento e, em seguida, arma o watcher.

        Raises:
            DetectionError: Sem event loop para os timers; nada é varrido
        """
        self.watcher.resolve_loop()
        self.logger.info("Iniciando varredura completa")
        self.scan([self.document.root])
        self.watcher.start()

    def stop(self) -> None:
        """Desarma o watcher e esquece os elementos rastreados."""
        self.watcher.stop()
        self._tracked.clear()
        self._deferred.clear()
        self.logger.info("Detector parado")

    # VARREDURA

    def scan(self, roots: Iterable[Tag]) -> list[PriceElement]:
        """
        Varre as raízes e despacha as novas descobertas em um único lote.

        Uma varredura pedida durante outra é adiada até a atual terminar.

        Args:
            roots: Elementos raiz a varrer

        Returns:
            PriceElements criados nesta chamada (inclui adiadas)
        """
        roots = list(roots)
        if self._state is DetectorState.SCANNING:
            self._deferred.append(roots)
            self.logger.debug("Varredura adiada", roots=len(roots))
            return []

        found: list[PriceElement] = []
        pending = [roots]
        while pending:
            found.extend(self._run_scan(pending.pop(0)))
            pending.extend(self._deferred)
            self._deferred.clear()
        return found

    def _run_scan(self, roots: list[Tag]) -> list[PriceElement]:
        self._state = DetectorState.SCANNING
        new_price_elements: list[PriceElement] = []

        try:
            for root in roots:
                if not self.document.contains(root):
                    self.logger.debug("Raiz desanexada ignorada", tag=getattr(root, "name", None))
                    continue
                new_price_elements.extend(self._scan_root(root))

            if new_price_elements:
                self.logger.info(
                    "Novos preços detectados",
                    total=len(new_price_elements),
                    tracked=len(self._tracked),
                )
                self._dispatch(new_price_elements)
        finally:
            self._state = DetectorState.IDLE

        return new_price_elements

    def _scan_root(self, root: Tag) -> list[PriceElement]:
        found: list[PriceElement] = []

        for node in TextNodeWalker(root):
            text = str(node)
            if not text.strip():
                continue

            matches = self.parser.find(text)
            if not matches:
                continue

            element = node.parent
            if element is None:
                raise DetectionInvariantError(
                    "Nó de texto sem elemento pai",
                    node_text=text,
                )

            if self.is_tracked(element):
                continue

            price_element = PriceElement(
                element=element,
                matches=matches,
                original_text=text,
            )
            self._tracked[id(element)] = price_element
            self.document.set_attribute(element, DETECTED_ATTRIBUTE, "true")
            found.append(price_element)

        return found

    def _dispatch(self, price_elements: list[PriceElement]) -> None:
        if self._on_prices_found is not None:
            self._on_prices_found(price_elements)
