from typing import Any, Dict, List, Optional, Union

from rich.box import ROUNDED
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.rule import Rule
from rich.style import Style
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from complexity_engine.analysis.models import (
    ApproachTriple,
    ClaimValidation,
    ComplexityResult,
    ConsensusResult,
    Correction,
)
from complexity_engine.analysis.languages import LanguageProfile
from complexity_engine.core.constants import APPROACHES
from complexity_engine.core.formatting import (
    format_confidence,
    format_pattern,
    format_source,
    format_time,
)

# ==============================================================================
# Constants & Global Console
# ==============================================================================

console = Console()

SUCCESS_STYLE = Style(color="green", bold=True)
FAIL_STYLE = Style(color="red", bold=True)
WARNING_STYLE = Style(color="yellow", bold=True)
INFO_STYLE = Style(color="blue", bold=True)
BOLD_STYLE = Style(bold=True)
DIM_STYLE = Style(dim=True)
CYAN_STYLE = Style(color="cyan")
YELLOW_STYLE = Style(color="yellow")
MAGENTA_STYLE = Style(color="magenta")

APPROACH_LABELS = {
    "brute_force": "Brute force",
    "better": "Better",
    "optimal": "Optimal",
}

# ==============================================================================
# Private Helper Functions
# ==============================================================================


def _create_panel(
    content: RenderableType,
    title: Optional[str] = None,
    border_style: Union[str, Style] = "blue",
    padding: tuple = (1, 2),
    **kwargs: Any
) -> Panel:
    """Helper function to create a Rich Panel."""
    return Panel(content, title=title, border_style=border_style, padding=padding, box=ROUNDED, **kwargs)


def _create_table(
    title: Optional[str] = None,
    show_header: bool = True,
    header_style: Union[str, Style] = "bold blue",
    **kwargs: Any
) -> Table:
    """Helper function to create a Rich Table."""
    return Table(title=title, box=ROUNDED, show_header=show_header, header_style=header_style, **kwargs)


def _print_status_message(icon: str, msg: str, style: Union[str, Style]):
    console.print(f"[{str(style)}]{icon}[/{str(style)}]  [{str(style)}]{msg}[/{str(style)}]")


def _confidence_style(confidence: float) -> Style:
    if confidence >= 0.9:
        return SUCCESS_STYLE
    if confidence >= 0.7:
        return WARNING_STYLE
    return FAIL_STYLE


# ==============================================================================
# General UI Elements
# ==============================================================================


def print_divider(title: Optional[str] = None):
    """Print a styled divider with optional title."""
    console.print(Rule(title=title, style=INFO_STYLE))


def print_info(msg: str):
    _print_status_message("ℹ", msg, INFO_STYLE)


def print_warning(msg: str):
    _print_status_message("⚠", msg, WARNING_STYLE)


def print_success(msg: str):
    _print_status_message("✓", msg, SUCCESS_STYLE)


def print_error(msg: str):
    _print_status_message("✗", msg, FAIL_STYLE)


# ==============================================================================
# Analysis Output
# ==============================================================================


def print_corrections(corrections: List[Correction], title: str = "Corrections"):
    """Table of every overwritten value with its reason."""
    if not corrections:
        return
    table = _create_table(title=f"[bold]{title}[/bold]")
    table.add_column("Approach", style=CYAN_STYLE)
    table.add_column("Field", style=MAGENTA_STYLE)
    table.add_column("Old", style=YELLOW_STYLE)
    table.add_column("New", style=SUCCESS_STYLE)
    table.add_column("Reason", overflow="fold")
    for correction in corrections:
        table.add_row(
            APPROACH_LABELS.get(correction.approach, correction.approach or "-"),
            correction.field,
            str(correction.old_value if correction.old_value is not None else "-"),
            str(correction.new_value if correction.new_value is not None else "-"),
            correction.reason,
        )
    console.print(table)


def print_analysis(result: ComplexityResult, title: Optional[str] = None, duration: Optional[float] = None):
    """Display one analysis verdict."""
    tree = Tree(f"[bold blue]{title or 'Complexity Analysis'}[/bold blue]")
    tree.add(f"[cyan]Time Complexity: {result.time_complexity}[/cyan]")
    space = tree.add(f"[cyan]Space Complexity: {result.space_complexity}[/cyan]")
    space.add(f"[dim]Peak: {result.space_metrics.peak}  Total: {result.space_metrics.total}[/dim]")
    tree.add(f"Pattern: {format_pattern(result.pattern)}")
    tree.add(f"Source: {format_source(result.source)}")
    tree.add(
        Text.assemble(
            "Confidence: ",
            (format_confidence(result.confidence), _confidence_style(result.confidence)),
        )
    )
    if result.approach:
        tree.add(f"Approach: {APPROACH_LABELS.get(result.approach, result.approach)}")
    console.print(_create_panel(tree))

    reasons = Group(
        Text.assemble(("Time: ", BOLD_STYLE), result.time_complexity_reason or "-"),
        Text.assemble(("Space: ", BOLD_STYLE), result.space_complexity_reason or "-"),
    )
    console.print(_create_panel(reasons, title="[blue]Explanation[/blue]"))
    if result.note:
        print_info(result.note)

    print_corrections(result.corrections_applied)
    if duration is not None:
        console.print(f"[dim]Analyzed in {format_time(duration)}[/dim]")


def print_claim_validation(validation: ClaimValidation):
    """Display the verdict on an external complexity claim."""
    if validation.valid:
        print_success(
            f"Claim confirmed: {validation.claimed.tc} time, {validation.claimed.sc} space"
        )
    elif validation.should_override:
        print_warning("Claim overridden by the engine")
    else:
        print_info("Claim differs from the engine but is kept")

    table = _create_table()
    table.add_column("", style=BOLD_STYLE)
    table.add_column("Claimed", style=YELLOW_STYLE)
    table.add_column("Result", style=SUCCESS_STYLE)
    table.add_column("Match")
    result = validation.corrected_result
    table.add_row(
        "Time",
        validation.claimed.tc or "-",
        result.time_complexity,
        "✓" if validation.time_match else "✗",
    )
    table.add_row(
        "Space",
        validation.claimed.sc or "-",
        result.space_complexity,
        "✓" if validation.space_match else "✗",
    )
    console.print(table)

    for error in validation.critical_errors:
        print_error(error)
    print_corrections(result.corrections_applied)


def _approach_tree(triple: ApproachTriple) -> Tree:
    tree = Tree("[bold blue]Solution[/bold blue]")
    for name in APPROACHES:
        approach = triple.get(name)
        label = APPROACH_LABELS[name]
        if approach is None:
            tree.add(f"[dim]{label}: none[/dim]")
            continue
        heading = f"{label}: {approach.name}" if approach.name else label
        branch = tree.add(f"[bold]{heading}[/bold]")
        branch.add(f"[cyan]Time: {approach.tc}[/cyan]")
        branch.add(f"[cyan]Space: {approach.sc}[/cyan]")
        if approach.algorithm:
            branch.add(f"[dim]{approach.algorithm}[/dim]")
    return tree


def print_triple(triple: ApproachTriple, title: Optional[str] = None):
    console.print(_create_panel(_approach_tree(triple), title=title))
    if triple.note:
        print_info(triple.note)


def print_consensus(result: ConsensusResult, problem_title: Optional[str] = None):
    """Display the consensus verdict for a brute/better/optimal triple."""
    print_divider(problem_title)
    console.print(
        Text.assemble(
            ("Source: ", BOLD_STYLE),
            format_source(result.source),
            ("  Confidence: ", BOLD_STYLE),
            (format_confidence(result.confidence), _confidence_style(result.confidence)),
        )
    )
    print_triple(result.solution)
    print_corrections(result.corrections)
    print_divider()


def print_ground_truth_entry(summary: Dict[str, Any]):
    """Display a ground truth record."""
    tree = Tree(f"[bold blue]{summary['id']}[/bold blue]")
    tree.add(f"Patterns: {', '.join(summary['patterns'])}")
    tree.add(f"Optimization ladder: {'yes' if summary['has_optimization_ladder'] else 'no'}")
    for name in APPROACHES:
        approach = summary.get(name)
        if not approach:
            continue
        branch = tree.add(f"[bold]{APPROACH_LABELS[name]}: {approach.get('name', '')}[/bold]")
        branch.add(f"[cyan]Time: {approach['tc']}  Space: {approach['sc']}[/cyan]")
        if approach.get("algorithm"):
            branch.add(f"[dim]{approach['algorithm']}[/dim]")
    console.print(_create_panel(tree, title="[blue]Ground Truth[/blue]"))
    if summary.get("note"):
        print_info(summary["note"])


def print_languages(profiles: List[LanguageProfile]):
    table = _create_table(title="[bold]Supported Languages[/bold]")
    table.add_column("Language", style=CYAN_STYLE)
    table.add_column("Aliases", style=YELLOW_STYLE)
    table.add_column("Blocks", style=DIM_STYLE)
    for profile in profiles:
        table.add_row(
            profile.name,
            ", ".join(sorted(profile.aliases)) or "-",
            "indentation" if profile.indentation_blocks else "braces",
        )
    console.print(table)
