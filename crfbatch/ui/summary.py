from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from crfbatch.domain.models import RunSummary


def format_size(size: float) -> str:
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.1f}{unit}"
        size /= 1024.0
    return f"{size:.1f}TB"


def build_summary_table(summary: RunSummary) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="bold")
    table.add_column("value", justify="right")

    table.add_row("Files found", str(summary.files_found))
    table.add_row("Succeeded", f"[green]{summary.succeeded}[/]")
    table.add_row("Failed", f"[red]{summary.failed}[/]" if summary.failed else "0")
    table.add_row("Median in file size", f"{summary.median_input_mb:.2f} MiB")
    table.add_row("Median out file size", f"{summary.median_output_mb:.2f} MiB")
    table.add_row("Total in", format_size(summary.total_input_bytes))
    table.add_row("Total out", format_size(summary.total_output_bytes))
    table.add_row(
        "Space saved",
        f"{format_size(summary.space_saved_bytes)} (ratio {summary.compression_ratio:.2f})",
    )
    return table


def render_summary(summary: RunSummary, console: Console) -> None:
    console.print(Panel(build_summary_table(summary), title="Run summary", expand=False))
