"""Rich display helpers for CLI output."""

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from attack_odds.combat import (
    AttackDamagePlanResult,
    AttackDamageResult,
    AttackOutcomeProbabilities,
    SaveDamageResult,
)
from attack_odds.prob import ProbabilityDistribution, probability_at_least
from attack_odds.rules import format_percent


# Shared console instance
console = Console()


def display_error(message: str) -> None:
    """Display error message.

    Args:
        message: Error message.
    """
    console.print(f"[bold red]Error:[/bold red] {message}")


def display_success(message: str) -> None:
    """Display success message.

    Args:
        message: Success message.
    """
    console.print(f"[bold green]{message}[/bold green]")


def display_info(message: str) -> None:
    """Display info message.

    Args:
        message: Info message.
    """
    console.print(f"[dim]{message}[/dim]")


def _create_probability_bar(probability: float, peak: float, width: int = 20) -> Text:
    """Create a Rich Text bar scaled against the largest probability shown.

    Args:
        probability: Probability to draw.
        peak: Largest probability in the table (fills the whole bar).
        width: Bar width in characters.

    Returns:
        Rich Text object with styled bar.
    """
    filled = int((probability / peak) * width) if peak > 0 else 0
    filled = max(0, min(width, filled))
    empty = width - filled

    bar_text = Text()
    bar_text.append("[", style="dim")
    bar_text.append("=" * filled, style="cyan")
    bar_text.append(" " * empty, style="dim")
    bar_text.append("]", style="dim")

    return bar_text


def display_outcome_probabilities(
    probabilities: AttackOutcomeProbabilities,
    precision: int = 2,
) -> None:
    """Display miss/hit/crit chances.

    Args:
        probabilities: Attack outcome chances.
        precision: Decimal places for percentages.
    """
    table = Table(title="Attack Outcome", box=box.ROUNDED)
    table.add_column("Outcome", style="bold")
    table.add_column("Chance", justify="right")

    table.add_row("[red]Miss[/red]", format_percent(probabilities.miss, precision))
    table.add_row("[green]Hit[/green]", format_percent(probabilities.hit, precision))
    table.add_row("[yellow]Critical[/yellow]", format_percent(probabilities.critical, precision))
    table.add_row(
        "[dim]Hit or critical[/dim]",
        format_percent(probabilities.hit_or_critical, precision),
    )

    console.print(table)


def display_damage_summary(result: AttackDamageResult, precision: int = 2) -> None:
    """Display expected damage for one attack.

    Args:
        result: Calculated attack damage.
        precision: Decimal places.
    """
    table = Table(title="Expected Damage", box=box.ROUNDED)
    table.add_column("Case", style="bold")
    table.add_column("Mean", justify="right")

    table.add_row("On hit", f"{result.expected_damage_on_hit:.{precision}f}")
    table.add_row("On critical", f"{result.expected_damage_on_critical:.{precision}f}")
    table.add_row("[cyan]Per attack[/cyan]", f"{result.expected_damage_per_attack:.{precision}f}")

    console.print(table)


def display_plan_summary(plan: AttackDamagePlanResult, precision: int = 2) -> None:
    """Display per-step and total expected damage of a plan.

    Args:
        plan: Calculated plan.
        precision: Decimal places.
    """
    table = Table(title="Attack Plan", box=box.ROUNDED)
    table.add_column("Step", justify="right")
    table.add_column("Repeat", justify="right")
    table.add_column("Per attack", justify="right")
    table.add_column("Total", justify="right")

    for index, step in enumerate(plan.steps, start=1):
        table.add_row(
            str(index),
            str(step.repeat),
            f"{step.result.expected_damage_per_attack:.{precision}f}",
            f"{step.expected_damage_total:.{precision}f}",
        )

    table.add_row("[bold]All[/bold]", "", "", f"[bold]{plan.expected_damage_per_plan:.{precision}f}[/bold]")
    console.print(table)


def display_distribution(
    distribution: ProbabilityDistribution,
    title: str = "Damage Distribution",
    precision: int = 2,
    max_rows: int = 40,
) -> None:
    """Display a distribution as a table of outcome, chance and at-least chance.

    Args:
        distribution: Distribution to show.
        title: Table title.
        precision: Decimal places for percentages.
        max_rows: Rows shown before the table is cut off.
    """
    if not distribution.entries:
        console.print("[dim]Distribution is empty.[/dim]")
        return

    peak = max(distribution.probabilities)

    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Damage", justify="right", style="bold")
    table.add_column("Chance", justify="right")
    table.add_column("At least", justify="right", style="dim")
    table.add_column("")

    for entry in distribution.entries[:max_rows]:
        table.add_row(
            str(entry.outcome),
            format_percent(entry.probability, precision),
            format_percent(probability_at_least(distribution, entry.outcome), precision),
            _create_probability_bar(entry.probability, peak),
        )

    console.print(table)

    hidden = len(distribution) - max_rows
    if hidden > 0:
        display_info(f"... {hidden} more outcome(s) not shown")


def display_save_result(result: SaveDamageResult, precision: int = 2) -> None:
    """Display save chances and expected damage.

    Args:
        result: Calculated save damage.
        precision: Decimal places.
    """
    table = Table(title="Saving Throw", box=box.ROUNDED)
    table.add_column("", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Save succeeds", format_percent(result.save_success_probability, precision))
    table.add_row("Save fails", format_percent(result.save_fail_probability, precision))
    table.add_row("[cyan]Expected damage[/cyan]", f"{result.expected_damage:.{precision}f}")

    console.print(table)
