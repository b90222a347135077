"""
Terminal rendering for the console front-end.

Record tables and notification lines are drawn with rich.
"""

from pathlib import Path
from typing import Dict, Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from campuscore.modules.entities.base import EntitySchema
from campuscore.modules.reconciliation.notifications import Notification, Severity
from campuscore.schemas.records import RecordBase


SEVERITY_STYLES = {
    Severity.SUCCESS: ("green", "✅"),
    Severity.INFO: ("blue", "ℹ️ "),
    Severity.WARNING: ("yellow", "⚠️ "),
    Severity.ERROR: ("red", "❌"),
}


class RecordRenderer:
    """Renders records and notifications in the terminal"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render_records(self, schema: EntitySchema, records: Iterable[RecordBase], criteria: Optional[Dict] = None):
        """Render a collection as a table, one row per record"""
        records = list(records)
        title = f"{schema.plural_label} ({len(records)})"
        if criteria:
            active = ", ".join(f"{key}={value}" for key, value in criteria.items() if value)
            if active:
                title += f" [dim]{active}[/dim]"

        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="dim", justify="right")
        table.add_column("Name", style="green")
        for key in schema.summary_fields:
            table.add_column(schema.field_spec(key).label)

        for record in records:
            table.add_row(
                "" if record.id is None else str(record.id),
                record.display_name,
                *["" if getattr(record, key, None) is None else str(getattr(record, key)) for key in schema.summary_fields],
            )

        if not records:
            self.console.print(f"[dim]No {schema.plural_label.lower()} found[/dim]")
            return
        self.console.print(table)

    def render_record(self, schema: EntitySchema, record: RecordBase):
        """Render a single record as a key/value panel"""
        table = Table(show_header=False, box=None)
        table.add_column("Field", style="dim")
        table.add_column("Value")
        table.add_row("ID", str(record.id))
        for spec in schema.fields:
            if not spec.stored:
                continue
            value = getattr(record, spec.key, None)
            table.add_row(spec.label, "" if value is None else str(value))
        self.console.print(Panel(table, title=f"[cyan]{schema.label}[/cyan]", border_style="cyan"))

    def render_notification(self, notification: Notification):
        style, icon = SEVERITY_STYLES.get(notification.severity, ("white", ""))
        self.console.print(f"[{style}]{icon} {notification.message}[/{style}]")

    def render_field_errors(self, schema: EntitySchema, errors: Dict[str, str]):
        for key, message in errors.items():
            try:
                label = schema.field_spec(key).label
            except KeyError:
                label = key
            self.console.print(f"  [red]•[/red] [bold]{label}[/bold]: {message}")

    def render_export(self, path: Path, count: int):
        self.console.print(f"[green]✅ Exported {count} record(s) to[/green] [bold]{path}[/bold]")

    def render_error(self, message: str, details: Optional[str] = None):
        error_panel = Panel(
            f"[bold red]{message}[/bold red]" +
            (f"\n\n[dim]{details}[/dim]" if details else ""),
            title="[red]Error[/red]",
            border_style="red"
        )
        self.console.print(error_panel)
