"""
Parser de valores monetários em texto livre.
Reconhece "$19.99", "1.234,50 €", "USD 10" e resolve matches sobrepostos.
"""

import re
from typing import Iterable, Optional

from config.logging_config import LoggerMixin
from cambio.core.constants import AMOUNT_PATTERN, CURRENCY_SYMBOLS, DECIMAL_MARKS, ISO_CODES
from cambio.core.models import PriceMatch


def build_currency_pattern(token: str) -> re.Pattern:
    """
    Monta o padrão "token antes do valor" OU "valor antes do token".

    O token (símbolo ou código ISO) é escapado: "C$" e "NZ$" casam literalmente.
    """
    escaped = re.escape(token)
    return re.compile(
        rf"(?:{escaped}\s*(?P<before>{AMOUNT_PATTERN}))"
        rf"|(?:(?P<after>{AMOUNT_PATTERN})\s*{escaped})"
    )


def parse_amount(amount_str: str) -> Optional[float]:
    """
    Normaliza um valor para float.

    O último "," ou "." é o separador decimal; os demais separadores e
    espaços (inclusive não separáveis) são descartados.

    Exemplos:
        "1.234,56" -> 1234.56
        "1,234.56" -> 1234.56
        "1 000"    -> 1000.0

    Returns:
        Valor ou None se não for numérico
    """
    clean = "".join(amount_str.split())
    decimal_pos = max(clean.rfind(mark) for mark in DECIMAL_MARKS)

    if decimal_pos >= 0:
        integer_part = clean[:decimal_pos]
        for mark in DECIMAL_MARKS:
            integer_part = integer_part.replace(mark, "")
        clean = f"{integer_part}.{clean[decimal_pos + 1:]}"

    try:
        return float(clean)
    except ValueError:
        return None


def resolve_overlaps(candidates: Iterable[PriceMatch]) -> list[PriceMatch]:
    """
    Remove matches sobrepostos.

    Ordena por início (ordenação estável); um candidato que se sobrepõe ao
    último aceito só o substitui se for estritamente mais longo.
    """
    result: list[PriceMatch] = []
    last_end = -1

    for match in sorted(candidates, key=lambda m: m.start):
        if match.start >= last_end:
            result.append(match)
            last_end = match.end
        elif match.length > result[-1].length:
            result[-1] = match
            last_end = match.end

    return result


class AmountParser(LoggerMixin):
    """
    Parser de preços orientado por tabela.
    Um padrão por símbolo e por código ISO; a política de conflito fica
    em resolve_overlaps.
    """

    def __init__(
        self,
        symbols: Optional[dict[str, str]] = None,
        iso_codes: Optional[Iterable[str]] = None,
    ):
        """
        Inicializa o parser.

        Args:
            symbols: Tabela símbolo -> código ISO (None = tabela padrão)
            iso_codes: Códigos ISO reconhecidos (None = códigos da tabela)
        """
        symbols = symbols if symbols is not None else CURRENCY_SYMBOLS
        if iso_codes is None:
            iso_codes = ISO_CODES if symbols is CURRENCY_SYMBOLS else dict.fromkeys(symbols.values())

        # Símbolos primeiro, depois códigos: define a ordem de desempate
        self._patterns: list[tuple[re.Pattern, str]] = [
            (build_currency_pattern(symbol), code)
            for symbol, code in symbols.items()
        ]
        self._patterns.extend(
            (build_currency_pattern(code), code) for code in iso_codes
        )

    def find(self, text: str) -> list[PriceMatch]:
        """
        Encontra todos os preços de um texto.

        Args:
            text: Texto livre

        Returns:
            Matches ordenados por início e sem sobreposição
        """
        if not text:
            return []
        return resolve_overlaps(self.find_candidates(text))

    def find_candidates(self, text: str) -> list[PriceMatch]:
        """Todos os matches brutos de todas as moedas (com sobreposições)."""
        candidates: list[PriceMatch] = []

        for pattern, code in self._patterns:
            for match in pattern.finditer(text):
                amount_str = match.group("before") or match.group("after")
                amount = parse_amount(amount_str)

                if amount is None:
                    self.logger.debug(
                        "Valor descartado",
                        raw=match.group(0),
                        currency=code,
                    )
                    continue

                candidates.append(PriceMatch(
                    raw=match.group(0),
                    amount=amount,
                    currency_code=code,
                    start=match.start(),
                    length=len(match.group(0)),
                ))

        return candidates
