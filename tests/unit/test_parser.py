"""
Testes unitários para o parser de valores monetários.
"""

import pytest

from cambio.core.constants import (
    ISO_CODES,
    REVERSE_CURRENCY_SYMBOLS,
    code_for_symbol,
    symbol_for_code,
)
from cambio.core.models import PriceMatch
from cambio.detector.parser import (
    AmountParser,
    build_currency_pattern,
    parse_amount,
    resolve_overlaps,
)


class TestAmountParser:
    """Testes para AmountParser."""

    @pytest.fixture
    def parser(self) -> AmountParser:
        """Instância do parser com a tabela padrão."""
        return AmountParser()

    # TESTES: find

    class TestFind:
        """Testes para reconhecimento de preços em texto."""

        def test_simbolo_antes_do_valor(self, parser):
            """Testa $19.99."""
            matches = parser.find("$19.99")

            assert len(matches) == 1
            assert matches[0].raw == "$19.99"
            assert matches[0].amount == 19.99
            assert matches[0].currency_code == "USD"
            assert matches[0].start == 0
            assert matches[0].length == 6

        def test_simbolo_depois_do_valor_formato_europeu(self, parser):
            """Testa 1.234,50 €."""
            matches = parser.find("1.234,50 €")

            assert len(matches) == 1
            assert matches[0].amount == 1234.50
            assert matches[0].currency_code == "EUR"
            assert matches[0].raw == "1.234,50 €"

        def test_codigo_iso_antes_do_valor(self, parser):
            """Testa USD 10."""
            matches = parser.find("USD 10")

            assert len(matches) == 1
            assert matches[0].raw == "USD 10"
            assert matches[0].amount == 10.0
            assert matches[0].currency_code == "USD"

        def test_simbolo_colado(self, parser):
            """Testa €5."""
            matches = parser.find("€5")

            assert [(m.amount, m.currency_code) for m in matches] == [(5.0, "EUR")]

        def test_agrupamento_por_espaco(self, parser):
            """Testa 1 000 kr."""
            matches = parser.find("1 000 kr")

            assert len(matches) == 1
            assert matches[0].amount == 1000.0
            assert matches[0].currency_code == "SEK"

        def test_simbolo_composto_vence_simbolo_simples(self, parser):
            """Testa C$10: o trecho mais longo (CAD) vence o $ interno."""
            matches = parser.find("C$10")

            assert len(matches) == 1
            assert matches[0].currency_code == "CAD"
            assert matches[0].raw == "C$10"

        def test_trecho_mais_longo_substitui_sobreposto(self, parser):
            """Testa $10 USD: "10 USD" é mais longo que "$10"."""
            matches = parser.find("$10 USD")

            assert len(matches) == 1
            assert matches[0].raw == "10 USD"
            assert matches[0].amount == 10.0
            assert matches[0].currency_code == "USD"

        def test_varios_precos_em_ordem(self, parser):
            """Testa texto com duas moedas."""
            matches = parser.find("Era $20 agora 15 €")

            assert [(m.raw, m.currency_code) for m in matches] == [
                ("$20", "USD"),
                ("15 €", "EUR"),
            ]

        def test_pagina_de_produto_em_um_no(self, parser):
            """Testa o texto de produto com preço e frete no mesmo nó."""
            text = "Cool Product $19.99 \u2014 Shipping 5€"

            matches = parser.find(text)

            assert [(m.raw, m.amount, m.currency_code) for m in matches] == [
                ("$19.99", 19.99, "USD"),
                ("5€", 5.0, "EUR"),
            ]
            assert [(m.start, m.length) for m in matches] == [(13, 6), (31, 2)]
            assert all(text[m.start:m.end] == m.raw for m in matches)

        def test_iene_sem_decimais(self, parser):
            """Testa ¥1000."""
            matches = parser.find("¥1000")

            assert matches[0].amount == 1000.0
            assert matches[0].currency_code == "JPY"

        def test_texto_vazio(self, parser):
            """Texto vazio não gera matches."""
            assert parser.find("") == []

        def test_texto_sem_precos(self, parser):
            """Texto sem moeda não gera matches."""
            assert parser.find("Entrega em 3 dias, desde 2024") == []

    # TESTES: propriedades

    class TestProperties:
        """Propriedades do resultado de find."""

        TEXTS = [
            "$19.99",
            "C$10 ou $12 ou 5€",
            "$10 USD e GBP 3,50",
            "Total: 1.234,50 € (antes 1 500 €)",
            "HK$ 88 | S$ 12.50 | NZ$9",
        ]

        @pytest.mark.parametrize("text", TEXTS)
        def test_deterministico(self, parser, text):
            """Mesma entrada, mesma saída."""
            assert parser.find(text) == parser.find(text)

        @pytest.mark.parametrize("text", TEXTS)
        def test_ordenado_e_sem_sobreposicao(self, parser, text):
            """Matches ordenados por início e disjuntos."""
            matches = parser.find(text)

            for previous, current in zip(matches, matches[1:]):
                assert previous.start <= current.start
                assert previous.end <= current.start

        @pytest.mark.parametrize("text", TEXTS)
        def test_trecho_corresponde_ao_texto(self, parser, text):
            """raw é exatamente o recorte indicado pelos offsets."""
            for match in parser.find(text):
                assert text[match.start:match.end] == match.raw

    def test_tabela_customizada(self):
        """Parser com tabela própria reconhece apenas seus símbolos."""
        parser = AmountParser(symbols={"R$": "BRL"})

        matches = parser.find("R$ 12,99")

        assert len(matches) == 1
        assert matches[0].amount == 12.99
        assert matches[0].currency_code == "BRL"
        assert parser.find("$5") == []


class TestParseAmount:
    """Testes para normalização de valores."""

    @pytest.mark.parametrize("amount_str,expected", [
        ("1.234,56", 1234.56),
        ("1,234.56", 1234.56),
        ("19.99", 19.99),
        ("19,99", 19.99),
        ("1 000", 1000.0),
        ("1\u00a0000", 1000.0),
        ("10", 10.0),
        ("0,99", 0.99),
    ])
    def test_normalizacao(self, amount_str, expected):
        """O último separador é o decimal."""
        assert parse_amount(amount_str) == expected

    def test_separadores_repetidos_usa_ultimo_como_decimal(self):
        """1.234.567: o último ponto vira decimal."""
        assert parse_amount("1.234.567") == 1234.567

    @pytest.mark.parametrize("amount_str", ["", "abc", "."])
    def test_valor_invalido(self, amount_str):
        """Entradas não numéricas retornam None."""
        assert parse_amount(amount_str) is None


class TestResolveOverlaps:
    """Testes para a política de sobreposição."""

    @staticmethod
    def _match(raw: str, start: int, code: str = "USD") -> PriceMatch:
        return PriceMatch(raw=raw, amount=1.0, currency_code=code, start=start, length=len(raw))

    def test_mantem_disjuntos(self):
        """Matches disjuntos são preservados e ordenados."""
        b = self._match("$2", 10)
        a = self._match("$1", 0)

        assert resolve_overlaps([b, a]) == [a, b]

    def test_mesmo_tamanho_mantem_primeiro(self):
        """Empate de tamanho: o primeiro aceito permanece."""
        first = self._match("$10", 0)
        second = self._match("10€", 1, "EUR")

        assert resolve_overlaps([first, second]) == [first]

    def test_mais_longo_substitui(self):
        """Sobreposto estritamente mais longo substitui o último aceito."""
        short = self._match("$10", 0)
        long = self._match("10 USD", 1)

        assert resolve_overlaps([short, long]) == [long]

    def test_vazio(self):
        assert resolve_overlaps([]) == []


def test_padrao_escapa_token():
    """Símbolos com metacaracteres casam literalmente."""
    pattern = build_currency_pattern("NZ$")

    match = pattern.search("NZ$ 9.50")

    assert match is not None
    assert match.group("before") == "9.50"
    assert pattern.search("NZ 9.50") is None


class TestLiteralCases:
    """Casos de referência do reconhecimento."""

    @pytest.mark.parametrize("text,amount,code", [
        ("$19.99", 19.99, "USD"),
        ("19,99 €", 19.99, "EUR"),
        ("£1,234.50", 1234.50, "GBP"),
        ("1.200,50 €", 1200.50, "EUR"),
        ("1 000 $", 1000.0, "USD"),
    ])
    def test_caso(self, text, amount, code):
        matches = AmountParser().find(text)

        assert len(matches) == 1
        assert matches[0].amount == amount
        assert matches[0].currency_code == code

    @pytest.mark.parametrize("text", ["1234", "USD", "preço em EUR"])
    def test_sem_valor_ou_sem_moeda(self, text):
        assert AmountParser().find(text) == []


class TestCurrencyTable:
    """Testes para a tabela de moedas."""

    def test_simbolo_para_codigo(self):
        assert code_for_symbol("€") == "EUR"
        assert code_for_symbol("NZ$") == "NZD"
        assert code_for_symbol("gbp") == "GBP"
        assert code_for_symbol("@") is None

    def test_codigo_para_simbolo(self):
        assert symbol_for_code("eur") == "€"
        assert symbol_for_code("XYZ") is None

    def test_codigos_sem_duplicatas(self):
        assert len(ISO_CODES) == len(set(ISO_CODES))
        assert ISO_CODES[0] == "USD"
        assert REVERSE_CURRENCY_SYMBOLS["CAD"] == "C$"
