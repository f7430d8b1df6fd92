"""Rich terminal report explaining a version derivation.

Shows which branch and tags were considered, which ref won, the prior
release that was found, and the resulting compatibility requirement.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table

from gitflux.core.types import Derivation
from gitflux.refs import RefKind

# Style per ref kind in the candidates table
_KIND_STYLES: dict[RefKind, str] = {
    RefKind.DEVELOP_BRANCH: "cyan",
    RefKind.TOPIC_BRANCH: "magenta",
    RefKind.RELEASE_TAG: "green",
    RefKind.PRERELEASE_TAG: "yellow",
}


class DerivationReport:
    """Render a Derivation (and the candidates behind it) to the terminal.

    Usage:
        report = DerivationReport(derivation)
        report.print()
    """

    def __init__(
        self,
        derivation: Derivation,
        console: Console | None = None,
    ) -> None:
        self._derivation = derivation
        self._console = console or Console()

    def print(self) -> None:
        self._console.print(self.render())

    def render(self) -> Any:
        """Render the full report as a single renderable."""
        parts: list[Any] = [self._render_header(), self._render_candidates()]
        if self._derivation.notes:
            parts.append(self._render_notes())
        parts.append(self._render_compatibility())
        return Group(*parts)

    def _render_header(self) -> Any:
        d = self._derivation
        snapshot = " [dim](snapshot)[/dim]" if d.is_snapshot else ""
        return Panel(
            f"[bold]{d.version}[/bold]{snapshot} from [bold]{d.ref.ref_name}[/bold] | "
            f"target release {d.target_release_version}",
            title="gitflux",
            style="bold white on blue",
        )

    def _render_candidates(self) -> Any:
        table = Table(title="Eligible refs (in order of preference)", expand=True)
        table.add_column("#", style="dim", width=4)
        table.add_column("Ref", style="white")
        table.add_column("Kind", width=16)
        table.add_column("Version", style="green")
        table.add_column("Target", style="yellow")

        for index, ref in enumerate(self._derivation.candidates, start=1):
            style = _KIND_STYLES[ref.kind]
            marker = " *" if ref == self._derivation.ref else ""
            table.add_row(
                str(index),
                f"{ref.ref_name}{marker}",
                f"[{style}]{ref.kind.value}[/{style}]",
                str(ref.version),
                str(ref.target_release_version),
            )

        return Panel(table)

    def _render_notes(self) -> Any:
        return Panel("\n".join(self._derivation.notes), title="Branch and tags at HEAD")

    def _render_compatibility(self) -> Any:
        d = self._derivation
        prior = str(d.prior_release) if d.prior_release else "[dim]none[/dim]"
        lines = [f"Prior release: {prior}"]
        if d.since is not None:
            lines.append(f"Artifact since: {d.since}")

        if d.decision.required:
            lines.append(
                f"[bold green]must be {d.decision.level.label} with {d.decision.against}[/bold green]"
            )
            border = "green"
        else:
            lines.append(f"[bold]no compatibility guarantees[/bold] ({d.decision.reason})")
            border = "yellow"

        lines.extend(f"[dim]{line}[/dim]" for line in d.decision.details)
        return Panel("\n".join(lines), title="Compatibility", border_style=border)
