"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import (
    BarberbookError,
    BookingValidationError,
    SlotConflictError,
)
from ..domain.models import BookingRequest, PaymentMethod, PaymentStatus
from ..domain.slot_calculator import SlotCalculator
from ..adapters.mock_store import MockStore
from ..adapters.postgrest_store import PostgrestStore
from ..services.availability import AvailabilityService
from ..services.booking_writer import BookingWriter
from ..services.business_hours import BusinessHoursService

app = typer.Typer(
    name="barberbook",
    help="Agenda de barbearias: horários disponíveis e agendamentos",
    add_completion=False
)

console = Console()

WEEKDAY_NAMES = {
    0: "Domingo",
    1: "Segunda-feira",
    2: "Terça-feira",
    3: "Quarta-feira",
    4: "Quinta-feira",
    5: "Sexta-feira",
    6: "Sábado",
}

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Usar dados de teste em memória em vez do backend.")]
DateOption = Annotated[Optional[str], typer.Option("--date", "-d", help="Data (YYYY-MM-DD). Padrão: hoje")]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    if not config_file and not config_path.exists():
        # Built-in defaults are enough for mock runs
        config = AppConfig()
    else:
        config = AppConfig.load_from_yaml(config_path)

    logging.basicConfig(
        level=config.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    return config


def _build_store(config: AppConfig, mock: bool):
    if mock:
        console.print("[yellow]⚠  MODO TESTE: usando dados de exemplo[/yellow]\n")
        return MockStore()

    if not config.supabase_url or not config.supabase_key:
        raise BarberbookError(
            "supabase_url e supabase_key precisam estar configurados (ou use --mock)."
        )
    return PostgrestStore(base_url=config.supabase_url, api_key=config.supabase_key)


def _build_availability(config: AppConfig, store) -> AvailabilityService:
    calculator = SlotCalculator(
        slot_grid=config.slot_grid,
        fallback_closed_weekdays=config.fallback_closed_weekdays,
    )
    return AvailabilityService(
        store=store,
        slot_calculator=calculator,
        timezone=config.timezone,
        fail_open=config.fail_open,
    )


def _resolve_date(date: Optional[str], tz: str) -> str:
    return date or pendulum.now(tz).to_date_string()


@app.command()
def slots(
    staff_id: Annotated[str, typer.Argument(help="ID do barbeiro")],
    date: DateOption = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show the bookable times of a staff member on a date.

    Examples:

        barberbook slots barber-joao --date 2026-11-03 --mock
    """
    try:
        config = _load_config(config_file)
        store = _build_store(config, mock)
        service = _build_availability(config, store)
        target_date = _resolve_date(date, config.timezone)

        available = service.compute_available_slots(staff_id, target_date)

        if not available:
            console.print(f"[yellow]⚠ Nenhum horário disponível em {target_date}.[/yellow]")
            return

        console.print(f"[bold green]✓ {len(available)} horário(s) disponível(is) em {target_date}:[/bold green]\n")
        console.print("  " + "  ".join(available))
        console.print()

    except (BarberbookError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Erro:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def agenda(
    staff_id: Annotated[str, typer.Argument(help="ID do barbeiro")],
    date: DateOption = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show a staff member's agenda for a day, one row per grid time.
    """
    try:
        config = _load_config(config_file)
        store = _build_store(config, mock)
        service = _build_availability(config, store)
        target_date = _resolve_date(date, config.timezone)

        entries = service.day_agenda(staff_id, target_date)

        table = Table(
            title=f"Agenda de {staff_id} em {target_date}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Horário", style="bold yellow")
        table.add_column("Cliente")
        table.add_column("Telefone", style="dim")
        table.add_column("Status")

        for entry in entries:
            booking = entry.booking
            if booking is None:
                table.add_row(entry.time, "[dim]livre[/dim]", "", "")
            else:
                table.add_row(entry.time, booking.client_name, booking.client_phone, booking.status)

        console.print()
        console.print(table)
        console.print()

    except (BarberbookError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Erro:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def book(
    staff_id: Annotated[str, typer.Option("--staff", help="ID do barbeiro")],
    tenant_id: Annotated[str, typer.Option("--shop", help="ID da barbearia")],
    service_id: Annotated[str, typer.Option("--service", help="ID do serviço")],
    date: Annotated[str, typer.Option("--date", "-d", help="Data (YYYY-MM-DD)")],
    time: Annotated[str, typer.Option("--time", "-t", help="Horário (HH:MM)")],
    client_name: Annotated[str, typer.Option("--name", help="Nome do cliente")],
    client_phone: Annotated[str, typer.Option("--phone", help="Telefone do cliente")],
    client_email: Annotated[Optional[str], typer.Option("--email", help="E-mail do cliente")] = None,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Observações")] = None,
    no_talk: Annotated[bool, typer.Option("--no-talk", help="Cliente prefere não conversar")] = False,
    payment_method: Annotated[PaymentMethod, typer.Option("--payment", help="Forma de pagamento")] = PaymentMethod.FREE,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Book a slot after re-checking that nobody took it.
    """
    payment_status = PaymentStatus.FREE if payment_method == PaymentMethod.FREE else PaymentStatus.PENDING

    try:
        config = _load_config(config_file)
        store = _build_store(config, mock)
        writer = BookingWriter(store)

        booking = writer.create_booking(
            BookingRequest(
                tenant_id=tenant_id,
                staff_id=staff_id,
                service_id=service_id,
                date=date,
                time=time,
                client_name=client_name,
                client_phone=client_phone,
                client_email=client_email,
                notes=notes,
                no_talk=no_talk,
                payment_status=payment_status.value,
                payment_method=payment_method.value,
            )
        )

        console.print(Panel.fit(
            f"[bold green]✓ Agendamento confirmado![/bold green]\n\n"
            f"[bold]Código:[/bold] {booking.id}\n"
            f"[bold]Data:[/bold] {booking.date} às {booking.time}\n"
            f"[bold]Cliente:[/bold] {booking.client_name} ({booking.client_phone})\n"
            f"[bold]Pagamento:[/bold] {booking.payment_method} / {booking.payment_status}",
            title="Agendamento"
        ))

    except BookingValidationError as e:
        console.print(f"[bold red]Dados obrigatórios não preenchidos:[/bold red] {', '.join(e.missing_fields)}")
        raise typer.Exit(1)

    except SlotConflictError:
        console.print("[bold red]Este horário já foi agendado. Por favor, escolha outro horário.[/bold red]")
        raise typer.Exit(1)

    except (BarberbookError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Erro:[/bold red] {e}")
        raise typer.Exit(1)


def _change_status(booking_id: str, action: str, config_file: Optional[Path], mock: bool) -> None:
    try:
        config = _load_config(config_file)
        store = _build_store(config, mock)
        writer = BookingWriter(store)
        booking = getattr(writer, action)(booking_id)
        console.print(f"[green]✓ Agendamento {booking.id}: {booking.status}[/green]")

    except (BarberbookError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Erro:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def confirm(
    booking_id: Annotated[str, typer.Argument(help="ID do agendamento")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """Mark a booking as confirmed."""
    _change_status(booking_id, "confirm", config_file, mock)


@app.command()
def cancel(
    booking_id: Annotated[str, typer.Argument(help="ID do agendamento")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """Cancel a booking, freeing its slot."""
    _change_status(booking_id, "cancel", config_file, mock)


@app.command()
def complete(
    booking_id: Annotated[str, typer.Argument(help="ID do agendamento")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """Mark a booking as completed."""
    _change_status(booking_id, "complete", config_file, mock)


@app.command()
def hours(
    tenant_id: Annotated[str, typer.Argument(help="ID da barbearia")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show the weekly business hours of a shop.
    """
    try:
        config = _load_config(config_file)
        store = _build_store(config, mock)
        week = BusinessHoursService(store).load_week(tenant_id)

        table = Table(
            title="Horários de funcionamento",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Dia", style="bold yellow")
        table.add_column("Abertura")
        table.add_column("Fechamento")

        for day in week:
            if day.is_open:
                table.add_row(WEEKDAY_NAMES[day.day_of_week], day.open_time or "-", day.close_time or "-")
            else:
                table.add_row(WEEKDAY_NAMES[day.day_of_week], "[red]fechado[/red]", "")

        console.print()
        console.print(table)
        console.print()

    except (BarberbookError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Erro:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def check_admin(
    email: Annotated[str, typer.Argument(help="E-mail autenticado")],
    config_file: ConfigOption = None,
):
    """
    Check whether an identity is on the configured admin allowlist.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Erro:[/bold red] {e}")
        raise typer.Exit(1)

    if config.is_admin(email):
        console.print(f"[green]✓ {email} tem acesso administrativo.[/green]")
    else:
        console.print(f"[red]✗ {email} não tem permissão para acessar o painel administrativo.[/red]")
        raise typer.Exit(1)


@app.command()
def test_connection(
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Test that the backend tables are reachable.
    """
    try:
        config = _load_config(config_file)
        store = _build_store(config, mock)
        info = store.test_connection()

        console.print(Panel.fit(
            f"[bold green]✓ Conexão estabelecida![/bold green]\n\n"
            f"[bold]URL:[/bold] {info.get('url', 'N/A')}",
            title="✓ Teste de conexão"
        ))

    except (BarberbookError, FileNotFoundError, ValueError) as e:
        console.print(f"\n[bold red]✗ Erro:[/bold red] {e}\n")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]barberbook[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
