"""CLI for the Consultation Engine.

Provides command-line access to response analysis, service matching,
lead routing, report generation and catalog inspection.
"""

import json
import sys
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from pydantic import BaseModel
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from service_catalog.catalog import CatalogError, CatalogService
from service_catalog.loader import CatalogLoadError, load_catalog_file
from service_catalog.schema import ServicePackage

from .config import find_config_file, get_config, load_config, reset_config
from .engine import ConsultationEngine
from .matcher import ServiceMatcher
from .report import MissingPrimaryMatchError, ReportAssembler
from .response_analyzer import ResponseAnalyzer
from .routing import RoutingDecisionEngine
from .schema import (
    AIReadinessResult,
    ClientInfo,
    InvalidInputError,
    MatchingResult,
    QuestionRoutingResult,
)

console = Console()

CLI_ERRORS = (
    InvalidInputError,
    MissingPrimaryMatchError,
    CatalogError,
    CatalogLoadError,
    OSError,
    json.JSONDecodeError,
    yaml.YAMLError,
)


@click.group()
@click.version_option(version="1.0.0", prog_name="consultation-engine")
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to an engine configuration YAML file"
)
def main(config: Optional[str]):
    """Consultation Matching and Routing Engine.

    Scores questionnaire answers, matches them against the service
    catalog and decides how each lead should be handled.
    """
    config_path = config or find_config_file()
    if config_path:
        try:
            load_config(config_path)
        except (OSError, yaml.YAMLError, ValueError) as e:
            console.print(f"[yellow]Warning:[/yellow] Could not load config: {e}")
            reset_config()


@main.command("analyze")
@click.option(
    "--answers", "-a",
    required=True,
    type=click.Path(exists=True),
    help="Path to questionnaire answers (JSON or YAML)"
)
@click.option(
    "--json", "json_output",
    is_flag=True,
    help="Output results as JSON"
)
def analyze_cmd(answers: str, json_output: bool):
    """Assess response readiness and lead qualification.

    Example:
        consultation-engine analyze -a answers.json
    """
    try:
        data = load_answers(answers)
        analysis = ResponseAnalyzer(get_config()).analyze(data)
    except CLI_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if json_output:
        output_json(analysis, None)
        return

    display_readiness(analysis.readiness)
    console.print(f"\nQualification score: [bold]{analysis.qualification_score}[/bold]/100")


@main.command("match")
@click.option(
    "--answers", "-a",
    required=True,
    type=click.Path(exists=True),
    help="Path to questionnaire answers (JSON or YAML)"
)
@click.option(
    "--catalog", "-c",
    type=click.Path(exists=True),
    help="Path to a service catalog file (default: built-in packages)"
)
@click.option(
    "--max-results", "-n",
    default=5,
    type=int,
    help="Maximum number of primary plus alternative matches"
)
@click.option(
    "--json", "-j", "json_output",
    is_flag=True,
    help="Output results as JSON"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show per-criterion scores"
)
def match_cmd(answers: str, catalog: Optional[str], max_results: int, json_output: bool, verbose: bool):
    """Match questionnaire answers against the service catalog.

    Examples:
        consultation-engine match -a answers.json
        consultation-engine match -a answers.json -c catalog.json -n 3 -v
    """
    try:
        data = load_answers(answers)
        service = load_catalog_service(catalog)
        result = ServiceMatcher(get_config()).match(data, list(service.packages()), max_results)
    except CLI_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if json_output:
        output_json(result, None)
    else:
        display_matches(result, verbose)


@main.command("route")
@click.option(
    "--answers", "-a",
    type=click.Path(exists=True),
    help="Path to questionnaire answers (JSON or YAML)"
)
@click.option(
    "--qualification", "-q",
    type=float,
    help="Qualification score (0-100)"
)
@click.option(
    "--completeness", "-p",
    type=float,
    help="Response completeness (0-100)"
)
@click.option(
    "--json", "json_output",
    is_flag=True,
    help="Output results as JSON"
)
def route_cmd(
    answers: Optional[str],
    qualification: Optional[float],
    completeness: Optional[float],
    json_output: bool,
):
    """Decide the next workflow step for a lead.

    Scores come from the answers file, or directly from -q and -p.

    Examples:
        consultation-engine route -a answers.json
        consultation-engine route -q 85 -p 75
    """
    if answers is None and (qualification is None or completeness is None):
        console.print("[yellow]Please specify --answers, or both --qualification and --completeness[/yellow]")
        sys.exit(1)

    try:
        config = get_config()
        if answers is not None:
            analysis = ResponseAnalyzer(config).analyze(load_answers(answers))
            qualification = analysis.qualification_score
            completeness = analysis.readiness.completeness
        result = RoutingDecisionEngine(config).route(qualification, completeness)
    except CLI_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if json_output:
        output_json(result, None)
    else:
        display_routing(result, qualification, completeness)


@main.command("report")
@click.option(
    "--answers", "-a",
    required=True,
    type=click.Path(exists=True),
    help="Path to questionnaire answers (JSON or YAML)"
)
@click.option(
    "--catalog", "-c",
    type=click.Path(exists=True),
    help="Path to a service catalog file (default: built-in packages)"
)
@click.option(
    "--client-name",
    help="Client name for the report header"
)
@click.option(
    "--company",
    help="Client company for the report header"
)
@click.option(
    "--out", "-o",
    type=click.Path(),
    help="Output file for the JSON report (default: stdout)"
)
def report_cmd(
    answers: str,
    catalog: Optional[str],
    client_name: Optional[str],
    company: Optional[str],
    out: Optional[str],
):
    """Generate a consultation report as JSON.

    Fails when no package is a strong enough match to recommend.

    Example:
        consultation-engine report -a answers.json --client-name "Jane Doe" -o report.json
    """
    client: dict[str, Any] = {}
    if client_name:
        client["name"] = client_name
    if company:
        client["company"] = company

    try:
        data = load_answers(answers)
        engine = ConsultationEngine(load_catalog_service(catalog), get_config())
        outcome = engine.evaluate(data, client_info=client)
        if outcome.report is None:
            raise MissingPrimaryMatchError(
                "No package is a strong enough match to report on "
                f"(routing: {outcome.routing.recommendation.value})"
            )
        output_json(outcome.report, out)
    except CLI_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if out:
        console.print(f"[green]Report saved to {out}[/green]")


# =============================================================================
# Catalog commands
# =============================================================================


@main.group("catalog")
def catalog_group():
    """Inspect and validate service catalogs."""


@catalog_group.command("list")
@click.option(
    "--catalog", "-c",
    type=click.Path(exists=True),
    help="Path to a service catalog file (default: built-in packages)"
)
@click.option(
    "--tier", "-t",
    type=click.Choice(["foundation", "growth", "enterprise"], case_sensitive=False),
    help="Filter by tier"
)
@click.option(
    "--industry", "-i",
    help="Filter by industry tag"
)
@click.option(
    "--query", "-s",
    help="Free-text search over title, description, category and features"
)
def catalog_list_cmd(
    catalog: Optional[str],
    tier: Optional[str],
    industry: Optional[str],
    query: Optional[str],
):
    """List service packages.

    Examples:
        consultation-engine catalog list
        consultation-engine catalog list -c catalog.yaml -t growth
    """
    try:
        service = load_catalog_service(catalog)
    except CLI_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    packages = service.search(query=query, tier=tier, industry=industry)

    table = Table(title=f"Service Packages ({len(packages)} of {len(service)})")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Tier")
    table.add_column("Price")
    table.add_column("Timeline")

    for package in packages:
        table.add_row(package.id, package.title, package.tier.value, package.price_band, package.timeline)

    console.print(table)


@catalog_group.command("show")
@click.argument("package_id")
@click.option(
    "--catalog", "-c",
    type=click.Path(exists=True),
    help="Path to a service catalog file (default: built-in packages)"
)
def catalog_show_cmd(package_id: str, catalog: Optional[str]):
    """Show details of one service package.

    Example:
        consultation-engine catalog show growth-acceleration-program
    """
    try:
        package = load_catalog_service(catalog).get(package_id)
    except CLI_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    display_package_detail(package)


@catalog_group.command("validate")
@click.argument("path", type=click.Path(exists=True))
def catalog_validate_cmd(path: str):
    """Validate a catalog file.

    Example:
        consultation-engine catalog validate catalog.json
    """
    try:
        catalog = load_catalog_file(path)
    except CatalogLoadError as e:
        console.print(f"[red]✗ Catalog invalid: {path}[/red]")
        console.print(f"  - {e}")
        sys.exit(1)

    console.print(f"[green]✓ Catalog valid: {path}[/green] ({catalog.total_packages} packages)")


# =============================================================================
# Helpers
# =============================================================================


def load_answers(path: str) -> dict[str, Any]:
    """Read questionnaire answers from a JSON or YAML file."""
    file_path = Path(path)
    with open(file_path, "r", encoding="utf-8") as f:
        if file_path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if not isinstance(data, dict):
        raise InvalidInputError(f"Answers file must contain an object, got {type(data).__name__}")
    return data


def load_catalog_service(path: Optional[str]) -> CatalogService:
    """Catalog from a file, or the built-in packages."""
    if path:
        return CatalogService.from_file(path)
    return CatalogService()


def display_readiness(readiness: AIReadinessResult):
    """Display readiness in formatted text."""
    quality_color = {
        "excellent": "green",
        "good": "green",
        "fair": "yellow",
        "poor": "red",
    }.get(readiness.quality.value, "white")

    console.print(Panel(
        f"Readiness: [bold]{readiness.score}[/bold]/100 "
        f"([{quality_color}]{readiness.quality.value}[/{quality_color}])\n\n"
        f"Completeness: {readiness.completeness}\n"
        f"Depth: {readiness.depth}\n"
        f"Consistency: {readiness.consistency}",
        title="Response Analysis",
    ))

    if readiness.recommendations:
        console.print("\n[bold]Recommendations:[/bold]")
        for rec in readiness.recommendations:
            console.print(f"  [cyan]•[/cyan] {rec}")


def display_matches(result: MatchingResult, verbose: bool):
    """Display ranked matches in formatted text."""
    console.print(
        f"\n[bold blue]Service Matching[/bold blue] "
        f"({result.total_services_evaluated} packages evaluated, "
        f"confidence {result.matching_confidence:.0%})\n"
    )

    if not result.all_matches:
        console.print("[yellow]No service packages to match against[/yellow]")
        return

    table = Table()
    table.add_column("#", justify="right")
    table.add_column("Package", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Confidence")
    table.add_column("Type")

    for i, match in enumerate(result.all_matches, 1):
        table.add_row(
            str(i),
            match.service.title,
            f"{match.match_score:.0%}",
            match.confidence_level.value,
            match.recommendation_type.value,
        )

    console.print(table)

    for label, matches in (("Primary", result.primary_matches), ("Alternative", result.alternative_matches)):
        if not matches:
            continue
        console.print(f"\n[bold]{label} Matches:[/bold]")
        for match in matches:
            console.print(f"  [green]•[/green] {match.service.title} ({match.service.price_band})")
            for reason in match.match_reasons:
                console.print(f"      {reason}")
            if verbose:
                for c in match.criteria:
                    console.print(
                        f"      [dim]{c.criterion}: {c.score:.2f} x {c.weight:.2f} = {c.weighted_score:.3f}[/dim]"
                    )


def display_routing(result: QuestionRoutingResult, qualification: float, completeness: float):
    """Display a routing decision in formatted text."""
    color = {
        "fast-track": "green",
        "continue": "cyan",
        "qualify-further": "yellow",
        "redirect-to-resources": "red",
    }.get(result.recommendation.value, "white")

    console.print(Panel(
        f"Recommendation: [bold {color}]{result.recommendation.value}[/bold {color}]\n"
        f"Score: {result.score}\n\n"
        f"Qualification: {qualification:.0f} | Completeness: {completeness:.0f}",
        title="Lead Routing",
    ))

    console.print("\n[bold]Reasoning:[/bold]")
    for reason in result.reasoning:
        console.print(f"  [green]•[/green] {reason}")

    console.print("\n[bold]Next Steps:[/bold]")
    for step in result.next_steps:
        console.print(f"  [cyan]•[/cyan] {step}")

    console.print(f"\nSuggested plans: {', '.join(result.plan_recommendations)}")


def display_package_detail(package: ServicePackage):
    """Display detailed package information."""
    tree = Tree(f"[bold cyan]{package.title}[/bold cyan]")

    identity = tree.add("[bold]Identity[/bold]")
    identity.add(f"ID: {package.id}")
    identity.add(f"Category: {package.category}")
    identity.add(f"Tier: {package.tier.value}")

    commercial = tree.add("[bold]Engagement[/bold]")
    commercial.add(f"Price: {package.price_band}")
    commercial.add(f"Timeline: {package.timeline}")

    if package.includes:
        includes = tree.add("[bold]Includes[/bold]")
        for feature in package.includes:
            includes.add(feature)

    if package.industry_tags:
        tree.add(f"[bold]Industries:[/bold] {', '.join(package.industry_tags)}")

    if package.eligibility_criteria:
        eligibility = tree.add("[bold]Designed For[/bold]")
        for question, values in package.eligibility_criteria.items():
            eligibility.add(f"{question}: {', '.join(values)}")

    console.print(tree)
    console.print(f"\n{package.description}")


def output_json(result: BaseModel, out_path: Optional[str]):
    """Output a result model as JSON."""
    json_str = result.model_dump_json(indent=2, by_alias=True)

    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(json_str)
    else:
        print(json_str)


@main.command("init-config")
@click.option(
    "--out", "-o",
    type=click.Path(),
    default="consultation-config.yaml",
    help="Output path for the configuration file"
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing config file"
)
def init_config_cmd(out: str, force: bool):
    """Generate a default engine configuration file.

    Creates a YAML configuration file with all available settings
    for tuning matching, confidence, routing and readiness.

    Example:
        consultation-engine init-config --out my-config.yaml
    """
    from .config import save_default_config

    out_path = Path(out)
    if out_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists: {out}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        save_default_config(out_path)
        console.print(f"[green]✓[/green] Config file created: {out}")
        console.print("\nThis file configures:")
        console.print("  • matching_weights - How much each criterion contributes to the match score")
        console.print("  • confidence_thresholds - When a match is High/Medium/Low confidence")
        console.print("  • matching_limits - How many primary and alternative matches to return")
        console.print("  • routing_thresholds - The lead routing decision table")
        console.print("  • readiness_weights - How readiness blends completeness, depth and consistency")
        console.print("\nThe engine will look for config in this order:")
        console.print("  1. CONSULTATION_ENGINE_CONFIG environment variable")
        console.print("  2. ./consultation-config.yaml (current directory)")
        console.print("  3. ~/.config/consultation-engine/config.yaml")
    except OSError as e:
        console.print(f"[red]Error creating config:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
