"""
Constantes do sistema: tabela de moedas, padrões de valor,
atributos marcadores e estilos injetados no documento.
"""

from typing import Final, Optional

# =============================================================================
# TABELA DE MOEDAS
# =============================================================================

# Símbolo (ou código) -> código ISO
CURRENCY_SYMBOLS: Final[dict[str, str]] = {
    "$": "USD",
    "€": "EUR",
    "£": "GBP",
    "¥": "JPY",
    "₹": "INR",
    "₽": "RUB",
    "kr": "SEK",
    "₩": "KRW",
    "₱": "PHP",
    "฿": "THB",
    "₫": "VND",
    "₪": "ILS",
    "C$": "CAD",
    "A$": "AUD",
    "NZ$": "NZD",
    "HK$": "HKD",
    "S$": "SGD",
    "CHF": "CHF",
}

# Código ISO -> símbolo (último símbolo da tabela vence)
REVERSE_CURRENCY_SYMBOLS: Final[dict[str, str]] = {
    code: symbol for symbol, code in CURRENCY_SYMBOLS.items()
}

# Códigos ISO conhecidos, sem duplicatas, na ordem da tabela
ISO_CODES: Final[tuple[str, ...]] = tuple(dict.fromkeys(CURRENCY_SYMBOLS.values()))


def code_for_symbol(symbol: str) -> Optional[str]:
    """Retorna o código ISO de um símbolo (ou o próprio código, se conhecido)."""
    if symbol in CURRENCY_SYMBOLS:
        return CURRENCY_SYMBOLS[symbol]
    if symbol.upper() in ISO_CODES:
        return symbol.upper()
    return None


def symbol_for_code(code: str) -> Optional[str]:
    """Retorna o símbolo de um código ISO."""
    return REVERSE_CURRENCY_SYMBOLS.get(code.upper())


# =============================================================================
# PADRÃO DE VALOR
# =============================================================================

# Dígitos agrupados por "." "," ou espaço, com fração opcional de 1-2 dígitos.
# Exemplos: "19.99", "1,234.50", "1.234,50", "1 000"
AMOUNT_PATTERN: Final[str] = r"\d+(?:[.,\s]\d{3})*(?:[.,]\d{1,2})?"

DECIMAL_MARKS: Final[tuple[str, ...]] = (",", ".")


# =============================================================================
# ATRIBUTOS MARCADORES
# =============================================================================

DETECTED_ATTRIBUTE: Final[str] = "data-cambio-detected"
CONVERTED_ATTRIBUTE: Final[str] = "data-cambio-converted"
ORIGINAL_TEXT_ATTRIBUTE: Final[str] = "data-cambio-original-text"
IGNORE_ATTRIBUTE: Final[str] = "data-cambio-ignore"

# Subárvores nunca varridas nem observadas
SKIPPED_TAGS: Final[frozenset[str]] = frozenset({"script", "style", "noscript", "iframe"})


# =============================================================================
# RENDERIZAÇÃO
# =============================================================================

RENDER_DELIMITER: Final[str] = " • "

# Valores de referência (os efetivos vêm das Settings)
THROTTLE_DELAY_MS: Final[int] = 500
BADGE_FADE_MS: Final[int] = 200

# Distância do badge acima do elemento (px)
BADGE_OFFSET_PX: Final[int] = 10

STYLE_ELEMENT_ID: Final[str] = "cambio-styles"
BADGE_CLASS: Final[str] = "cambio-badge"
HIGHLIGHT_CLASS: Final[str] = "cambio-highlight"
VISIBLE_CLASS: Final[str] = "visible"

INJECTED_STYLES: Final[str] = """
.cambio-badge {
  position: absolute;
  background: #1c1917;
  color: white;
  padding: 4px 8px;
  border-radius: 6px;
  font-size: 12px;
  font-family: system-ui, sans-serif;
  z-index: 10000;
  pointer-events: none;
  box-shadow: 0 4px 6px -1px rgb(0 0 0 / 0.1);
  opacity: 0;
  transition: opacity 0.2s ease;
  transform: translateY(-100%);
  margin-top: -5px;
  white-space: nowrap;
}

.cambio-highlight {
  cursor: help;
  text-decoration: underline dotted #ea580c;
  text-underline-offset: 2px;
}

.cambio-badge.visible {
  opacity: 1;
}
"""
