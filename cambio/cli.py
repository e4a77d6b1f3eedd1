"""
Interface de linha de comando (CLI) do Cambio.
Usa Typer para comandos e Rich para tabelas; o HTML gerado vai para stdout
e logs/mensagens para stderr.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from config.logging_config import setup_logging
from config.pipeline import PipelineConfig
from config.settings import get_settings
from cambio.core.exceptions import CambioError, ConfigurationError
from cambio.core.types import RenderMode
from cambio.detector.detector import PriceDetector
from cambio.detector.parser import AmountParser
from cambio.document.live_document import LiveDocument
from cambio.pipeline.pipeline import PriceConversionPipeline
from cambio.rates.provider import StaticRateProvider

# Inicializa CLI
app = typer.Typer(
    name="cambio",
    help="Detecção e conversão de preços em documentos HTML.",
    add_completion=False,
)

# Console Rico para output formatado
console = Console()
err_console = Console(stderr=True)


def run_async(coro):
    """Helper para executar corrotinas."""
    return asyncio.run(coro)


@app.callback()
def main_options(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", "-l", help="Nível de log (DEBUG, INFO, WARNING, ERROR)"
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Logs em formato JSON"),
):
    """
    Configura logging antes de qualquer comando.
    """
    settings = get_settings()
    try:
        setup_logging(
            level=log_level or settings.log_level,
            log_path=settings.log_path,
            json_format=json_logs or settings.env == "production",
        )
    except CambioError as e:
        err_console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(code=1)


@app.command("parse")
def parse(
    text: str = typer.Argument(..., help="Texto livre (ex: 'De $19.99 por 15 €')"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Saída em formato JSON"),
):
    """
    Reconhece preços em um texto.

    Exemplos:
        cambio parse "Apenas $19.99 hoje"
        cambio parse "1.234,50 € ou USD 10" --json
    """
    matches = AmountParser().find(text)

    if json_output:
        console.print_json(json.dumps([m.model_dump(mode="json") for m in matches]))
        return

    if not matches:
        console.print("[yellow]Nenhum preço encontrado.[/yellow]")
        return

    table = Table(title=f"Encontrados {len(matches)} preços")
    table.add_column("#", style="dim", width=4)
    table.add_column("Trecho", style="white")
    table.add_column("Valor", justify="right", style="green")
    table.add_column("Moeda", style="cyan")
    table.add_column("Posição", justify="right", style="dim")

    for i, match in enumerate(matches, 1):
        table.add_row(
            str(i),
            match.raw,
            f"{match.amount:.2f}",
            match.currency_code,
            f"{match.start}-{match.end}",
        )

    console.print(table)


@app.command("scan")
def scan(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Arquivo HTML"),
):
    """
    Detecta elementos com preço em um arquivo HTML.

    Exemplos:
        cambio scan pagina.html
    """
    document = LiveDocument.from_file(file)
    price_elements = PriceDetector(document).scan([document.root])

    if not price_elements:
        console.print("[yellow]Nenhum preço encontrado.[/yellow]")
        return

    table = Table(title=f"Encontrados {len(price_elements)} elementos")
    table.add_column("#", style="dim", width=4)
    table.add_column("Tag", style="cyan")
    table.add_column("Texto", style="white", overflow="fold")
    table.add_column("Preços", style="green")

    for i, price_element in enumerate(price_elements, 1):
        table.add_row(
            str(i),
            price_element.tag_name,
            price_element.original_text.strip()[:60],
            ", ".join(f"{m.amount:.2f} {m.currency_code}" for m in price_element.matches),
        )

    console.print(table)


@app.command("convert")
def convert(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Arquivo HTML"),
    rates: Optional[Path] = typer.Option(None, "--rates", "-r", help="Tabela de taxas (JSON)"),
    target: Optional[list[str]] = typer.Option(
        None, "--target", "-t", help="Moeda alvo (repetível)"
    ),
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Moeda base das taxas"),
    mode: Optional[RenderMode] = typer.Option(None, "--mode", "-m", help="replace ou badge"),
    locale: Optional[str] = typer.Option(None, "--locale", help="Locale de formatação"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Arquivo de saída"),
):
    """
    Converte os preços de um arquivo HTML e emite o documento renderizado.

    Exemplos:
        cambio convert pagina.html --rates taxas.json
        cambio convert pagina.html -r taxas.json -t EUR -t GBP --mode badge
        cambio convert pagina.html -r taxas.json --output convertida.html
    """
    settings = get_settings()

    try:
        rates_path = rates or settings.rates_path
        if rates_path is None:
            raise ConfigurationError(
                "Informe a tabela de taxas (--rates ou CAMBIO_RATES_PATH)",
                field="rates_path",
            )

        config = _build_config(settings, target, base, mode, locale)
        provider = StaticRateProvider.from_json(rates_path)
        document = LiveDocument.from_file(file)
        pipeline = PriceConversionPipeline(document, provider, config, settings=settings)

        started = run_async(_run_once(pipeline))
    except CambioError as e:
        err_console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(code=1)

    if not started:
        err_console.print("[red]✗ Pipeline não iniciado[/red]")
        raise typer.Exit(code=1)

    html = document.to_html()
    if output:
        output.write_text(html, encoding="utf-8")
        err_console.print(f"[green]✓ Documento salvo em: {output}[/green]")
    else:
        typer.echo(html)

    stats = pipeline.stats
    err_console.print(
        f"[bold]Resumo:[/bold] {stats['detected']} detectados, "
        f"{stats['rendered']} convertidos, {stats['skipped']} ignorados"
    )


@app.command("version")
def version():
    """
    Exibe a versão do sistema.
    """
    from cambio import __version__

    console.print(f"[bold blue]Cambio[/bold blue] v{__version__}")
    console.print("Detecção e conversão de preços em documentos HTML")


# FUNÇÕES AUXILIARES

def _build_config(settings, target, base, mode, locale) -> PipelineConfig:
    """Combina opções da linha de comando com as settings."""
    try:
        return PipelineConfig(
            enabled=True,
            base_currency=base or settings.base_currency,
            target_currencies=target or settings.target_currencies,
            mode=mode or RenderMode(settings.render_mode),
            locale=locale or settings.locale,
        )
    except ValidationError as e:
        raise ConfigurationError("Opções de conversão inválidas", cause=e)


async def _run_once(pipeline: PriceConversionPipeline) -> bool:
    """Executa a varredura inicial e encerra a observação."""
    started = await pipeline.start()
    if started:
        pipeline.stop()
    return started


# ENTRY POINT

def main():
    """Entry point principal."""
    app()


if __name__ == "__main__":
    main()
