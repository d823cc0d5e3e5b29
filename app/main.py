"""
Terminal Frontend for PlainFiles

This is the menu-driven console the operator works in.

DESIGN PRINCIPLES:
1. Log in first; three failures block the user
2. Explicit confirmation before deleting
3. Validation failures are shown verbatim, the session continues
4. Nothing is written to disk until "Save changes"

All business rules live in the plainfiles package. This module only
prompts, renders and routes.
"""

from decimal import Decimal
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from plainfiles.audit import configure_logging
from plainfiles.auth import CredentialPrompt
from plainfiles.config import StorageSettings, get_settings, validate_all_settings
from plainfiles.models.person import Person, PersonUpdate
from plainfiles.orchestrator import (
    RegistrySession,
    create_app_components,
    create_authenticator,
)
from plainfiles.services.storage import StorageError
from plainfiles.services.storage.flat_file import parse_decimal, parse_int


console = Console()

app = typer.Typer(
    help="📇 PlainFiles - person registry over plain text files",
    add_completion=False,
)

MENU = """
====================================
1. List people
2. Add person
3. Edit person
4. Delete person
5. Save changes
6. Report by city
0. Exit
===================================="""


def format_money(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def ask(label: str, default: str = "") -> str:
    return typer.prompt(label, default=default, show_default=False)


def make_credential_prompt(max_attempts: int) -> CredentialPrompt:
    """Login prompt handed to the authenticator."""

    def ask_credentials(remaining: int) -> tuple[str, str]:
        if remaining < max_attempts:
            console.print(
                f"[red]Invalid credentials. Attempts remaining: {remaining}[/red]"
            )
        console.print("\n[bold]=== LOGIN ===[/bold]")
        username = ask("Username")
        password = typer.prompt("Password", default="", show_default=False, hide_input=True)
        return username, password

    return ask_credentials


def render_person(person: Person) -> None:
    console.print(f"ID: {person.id}")
    console.print(f"Name: {person.full_name}")
    console.print(f"Phone: {person.phone}")
    console.print(f"City: {person.city}")
    console.print(f"Balance: {format_money(person.balance)}")


def show_people(session: RegistrySession) -> None:
    """List every person in the registry."""
    console.print("[bold]=== PEOPLE ===[/bold]\n")

    people = session.list_people()
    if not people:
        console.print("[yellow]No people registered.[/yellow]")
        return

    table = Table(title=f"{len(people)} people")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="green")
    table.add_column("Phone", style="blue")
    table.add_column("City", style="magenta")
    table.add_column("Balance", style="yellow", justify="right")

    for p in people:
        table.add_row(str(p.id), p.full_name, p.phone, p.city, format_money(p.balance))

    console.print(table)


def add_person(session: RegistrySession) -> None:
    """Collect a new person and add it."""
    console.print("[bold]=== ADD PERSON ===[/bold]")

    while True:
        person_id = parse_int(ask("ID (positive integer)"))
        if person_id is None:
            console.print("[red]The ID must be an integer.[/red]")
            continue
        if person_id <= 0:
            console.print("[red]The ID must be greater than zero.[/red]")
            continue
        break

    first_name = ask("First name")
    last_name = ask("Last name")
    phone = ask("Phone")
    city = ask("City")

    balance = parse_decimal(ask("Balance"))
    if balance is None:
        console.print("[red]The balance must be a valid number.[/red]")
        return

    person = Person(
        id=person_id,
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        city=city,
        balance=balance,
    )

    result = session.add_person(person)
    if result.is_valid:
        console.print("[green]✅ Person added.[/green]")
    else:
        console.print(f"[red]❌ Could not add person: {result.reason}[/red]")


def _optional(value: str) -> Optional[str]:
    return value if value.strip() else None


def edit_person(session: RegistrySession) -> None:
    """Edit an existing person; blank input keeps the current value."""
    console.print("[bold]=== EDIT PERSON ===[/bold]")

    person_id = parse_int(ask("ID of the person to edit"))
    if person_id is None:
        console.print("[red]The ID must be an integer.[/red]")
        return

    person = session.find_person(person_id)
    if person is None:
        console.print(f"[yellow]No person found with ID {person_id}.[/yellow]")
        return

    console.print(f"\nEditing: {person.full_name}")
    console.print("Leave a field empty and press ENTER to keep the current value.\n")

    first_name = _optional(ask(f"New first name ({person.first_name})"))
    last_name = _optional(ask(f"New last name ({person.last_name})"))
    phone = _optional(ask(f"New phone ({person.phone})"))
    city = _optional(ask(f"New city ({person.city})"))

    balance = None
    balance_text = _optional(ask(f"New balance ({person.balance})"))
    if balance_text is not None:
        balance = parse_decimal(balance_text)
        if balance is None:
            console.print("[yellow]Invalid balance. The previous balance is kept.[/yellow]")

    update = PersonUpdate(
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        city=city,
        balance=balance,
    )

    result = session.edit_person(person_id, update)
    if result.is_valid:
        console.print("[green]✅ Person updated.[/green]")
    else:
        console.print(f"[red]❌ Could not update person: {result.reason}[/red]")


def delete_person(session: RegistrySession) -> None:
    """Show a person and delete it after confirmation."""
    console.print("[bold]=== DELETE PERSON ===[/bold]")

    person_id = parse_int(ask("ID of the person to delete"))
    if person_id is None:
        console.print("[red]The ID must be an integer.[/red]")
        return

    person = session.find_person(person_id)
    if person is None:
        console.print(f"[yellow]No person found with ID {person_id}.[/yellow]")
        return

    console.print("\nFound the following record:")
    render_person(person)
    console.print()

    if typer.confirm("Are you sure you want to delete this person?", default=False):
        session.delete_person(person_id)
        console.print("[green]✅ Person deleted.[/green]")
    else:
        console.print("Cancelled. No changes were made.")


def save_changes(session: RegistrySession) -> None:
    session.save()
    console.print("[green]✅ Changes saved.[/green]")


def report_by_city(session: RegistrySession) -> None:
    """Render people grouped by city with subtotals."""
    console.print("[bold]=== REPORT BY CITY ===[/bold]\n")

    report = session.report_by_city()
    if report.is_empty:
        console.print("[yellow]No people registered.[/yellow]")
        return

    for group in report.groups:
        table = Table(title=f"City: {group.city}")
        table.add_column("ID", style="cyan", justify="right")
        table.add_column("First name", style="green")
        table.add_column("Last name", style="green")
        table.add_column("Balance", style="yellow", justify="right")

        for p in group.people:
            table.add_row(str(p.id), p.first_name, p.last_name, format_money(p.balance))

        console.print(table)
        console.print(f"Total {group.city}: {format_money(group.total)}\n")

    console.print("=====")
    console.print(f"[bold]Grand total: {format_money(report.grand_total)}[/bold]")


ACTIONS = {
    "1": show_people,
    "2": add_person,
    "3": edit_person,
    "4": delete_person,
    "5": save_changes,
    "6": report_by_city,
}


def run_menu(session: RegistrySession) -> None:
    """Main menu loop; returns when the operator chooses 0."""
    option = ""
    while option != "0":
        console.print(MENU)
        option = ask("Choose an option").strip()

        if option == "0":
            console.print("Exiting...")
        elif option in ACTIONS:
            ACTIONS[option](session)
        else:
            console.print("[red]Invalid option.[/red]")


@app.command()
def run(
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Directory holding people.txt, Users.txt and log.txt",
    ),
) -> None:
    """Log in and manage the person registry."""
    status = validate_all_settings()
    failed = [name for name in ("storage", "auth", "app") if not status.get(name, False)]
    if failed:
        for name in failed:
            error = escape(status[f"{name}_error"])
            console.print(f"[red]❌ Configuration error ({name}): {error}[/red]")
        raise typer.Exit(code=1)

    settings = get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level)

    storage_settings = StorageSettings(data_dir=data_dir) if data_dir else settings.storage
    auth_settings = settings.auth

    try:
        session = create_app_components(storage_settings, app_settings)
        authenticator = create_authenticator(
            make_credential_prompt(auth_settings.max_attempts),
            auth_settings,
        )

        result = session.login(authenticator)
        if not result.is_authenticated:
            console.print("[red]User blocked after too many failed attempts.[/red]")
            console.print("[red]Access denied. Contact the administrator to unblock.[/red]")
            raise typer.Exit(code=1)

        console.print(f"[green]Welcome, {result.user.username}![/green]")
        run_menu(session)

    except StorageError as e:
        console.print(f"[red]❌ Storage failure: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
