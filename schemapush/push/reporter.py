"""Print upload results as they arrive, then the final summary."""

from __future__ import annotations

from rich.console import Console

from schemapush.registry.models import Result, Total


class Reporter:
    """Writes the push output contract to a rich console.

    One ``SUCCESS:``/``FAILURE:`` line per result, then two ``TOTAL:``
    lines and an optional ``WARNING:`` line.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(soft_wrap=True)

    def report(self, result: Result) -> None:
        if result.status.is_success:
            self.console.print("[green]SUCCESS:[/]", end=" ")
        else:
            self.console.print("[red]FAILURE:[/]", end=" ")
        # Raw text, no tab expansion or control-character stripping
        self.console.file.write(result.as_string() + "\n")
        self.console.file.flush()

    def summary(self, total: Total) -> None:
        self.console.print(
            f"TOTAL: {total.uploaded} Schemas successfully uploaded "
            f"({total.creates} created; {total.updates} updated)",
            highlight=False,
        )
        self.console.print(f"TOTAL: {total.failures} failed Schema uploads", highlight=False)
        if total.unknown > 0:
            self.console.print(
                f"[yellow]WARNING:[/] {total.unknown} unknown statuses", highlight=False
            )
