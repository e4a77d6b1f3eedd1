"""
Pipeline de conversão completo.
Liga detector, fonte de taxas, formatter e renderizador sobre um documento.
"""

from typing import Iterable, Optional

from config.logging_config import LoggerMixin
from config.pipeline import PipelineConfig
from config.settings import Settings, get_settings
from cambio.core.exceptions import RateProviderError, UnknownCurrencyError
from cambio.core.models import ConvertedPrice, PriceElement, PriceMatch
from cambio.detector.detector import PriceDetector
from cambio.document.live_document import LiveDocument
from cambio.rates.provider import RateProvider, convert_via_base
from cambio.render.formatter import CurrencyFormatter
from cambio.render.renderer import PresentationEngine


class PriceConversionPipeline(LoggerMixin):
    """
    Dono do ciclo de vida da conversão.
    Fluxo: taxas (uma vez) -> detecção -> conversão -> renderização
    """

    def __init__(
        self,
        document: LiveDocument,
        rate_provider: RateProvider,
        config: Optional[PipelineConfig] = None,
        formatter: Optional[CurrencyFormatter] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Inicializa o pipeline com seus componentes.

        Args:
            document: Documento a processar
            rate_provider: Fonte de taxas
            config: Parâmetros de conversão (None = derivados das settings)
            formatter: Formatter monetário (None = Babel com o locale da config)
            settings: Settings explícitas (None = singleton)
        """
        settings = settings or get_settings()
        self.document = document
        self.rate_provider = rate_provider
        self.config = config or PipelineConfig.from_settings(settings)
        self.formatter = formatter or CurrencyFormatter(self.config.locale or settings.locale)

        self.detector = PriceDetector(document, throttle_seconds=settings.throttle_seconds)
        self.renderer = PresentationEngine(document, fade_seconds=settings.badge_fade_seconds)

        self._rates: Optional[dict[str, float]] = None
        self._running = False
        self.stats = {"detected": 0, "rendered": 0, "skipped": 0}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def rates(self) -> Optional[dict[str, float]]:
        return self._rates

    async def start(self) -> bool:
        """
        Busca as taxas e inicia a detecção.

        Returns:
            True se o pipeline foi iniciado
        """
        log = self.log_operation("start", base=self.config.base_currency)

        if not self.config.enabled:
            log.info("Conversão desabilitada")
            return False

        try:
            self._rates = await self.rate_provider.get_rates(self.config.base_currency)
        except RateProviderError as e:
            log.error("Falha ao obter taxas", error=str(e))
            return False

        log.info("Taxas recebidas", currencies=len(self._rates))

        self.detector.on_prices_found(self.process_elements)
        self.detector.start()
        self._running = True
        return True

    def stop(self) -> None:
        """Para a detecção e remove a UI transitória."""
        self.detector.stop()
        self.renderer.teardown()
        self._running = False
        self.logger.info("Pipeline parado", **self.stats)

    def process_elements(self, elements: Iterable[PriceElement]) -> int:
        """
        Converte e renderiza um lote de elementos detectados.

        Só o primeiro match de cada elemento é convertido.

        Args:
            elements: Lote entregue pelo detector

        Returns:
            Quantidade de elementos renderizados
        """
        if self._rates is None or not self.config.enabled:
            return 0

        rendered = 0
        for price_element in elements:
            self.stats["detected"] += 1

            match = price_element.first_match
            if match is None:
                self.stats["skipped"] += 1
                continue

            conversions = self.build_conversions(match)
            if not conversions:
                self.stats["skipped"] += 1
                continue

            self.renderer.render(price_element, conversions, self.config.mode)
            rendered += 1

        self.stats["rendered"] += rendered
        self.logger.debug("Lote convertido", rendered=rendered)
        return rendered

    def build_conversions(self, match: PriceMatch) -> list[ConvertedPrice]:
        """
        Converte um match para cada moeda alvo.

        A moeda de origem é pulada; moedas sem taxa são ignoradas.

        Args:
            match: Preço reconhecido

        Returns:
            Conversões na ordem das moedas alvo
        """
        if self._rates is None:
            return []

        conversions: list[ConvertedPrice] = []
        for target in self.config.target_currencies:
            if match.currency_code == target:
                continue

            try:
                amount = convert_via_base(
                    match.amount,
                    match.currency_code,
                    target,
                    self._rates,
                )
            except UnknownCurrencyError as e:
                self.logger.debug(
                    "Conversão ignorada",
                    source=match.currency_code,
                    target=target,
                    currency=e.currency,
                )
                continue

            conversions.append(ConvertedPrice(
                amount=amount,
                currency_code=target,
                formatted=self.formatter.format(amount, target, self.config.locale),
            ))

        return conversions
