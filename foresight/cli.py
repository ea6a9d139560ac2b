import json
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from foresight.api import Foresight
from foresight.exceptions import ForesightError
from foresight.logger import setup_logger
from foresight.mocks import MockDataProvider
from foresight.models import Horizon, Persona

cli = typer.Typer(help="Foresight predictive analytics")


@cli.callback()
def main() -> None:
    setup_logger()


@cli.command("forecast")
def forecast(
    persona: Annotated[Persona, typer.Argument(help="Customer persona")],
    horizons: Annotated[Optional[list[Horizon]], typer.Option("--horizon", "-h", help="Forecast horizon")] = None,
    data_file: Annotated[Optional[Path], typer.Option(help="JSON file with raw business records")] = None,
    analysis_date: Annotated[Optional[datetime], typer.Option(formats=["%Y-%m-%d"])] = None,
    seed: Annotated[Optional[int], typer.Option(help="Random seed for mock data and bootstrap bands")] = None,
    output: Annotated[Optional[Path], typer.Option(help="Write the JSON result here instead of stdout")] = None,
):
    """Generate a forecast from a data file, or from synthetic data when none is given"""
    foresight = Foresight(config={"random_seed": seed}, data_provider=MockDataProvider(seed=seed))
    data = json.loads(data_file.read_text()) if data_file else None
    try:
        result = foresight.generate_forecast(
            persona, horizons or None, data, analysis_date.date() if analysis_date else None
        )
    except ForesightError as exc:
        typer.secho(f"Error: {exc.message}", fg=typer.colors.RED, bold=True, err=True)
        raise typer.Exit(code=1) from exc

    payload = json.dumps(result.to_dict(), indent=2)
    if output:
        output.write_text(payload)
        typer.secho(f"Forecast written to {output}", fg=typer.colors.GREEN)
    else:
        typer.echo(payload)

    summary = foresight.summarize_creator_check(result)
    colour = typer.colors.GREEN if result.creator_check.passed else typer.colors.YELLOW
    typer.secho(f"Creator check: {summary.status} - {summary.summary}", fg=colour, err=True)


@cli.command("schema")
def schema():
    """Print the JSON schema of the forecast output"""
    typer.echo(json.dumps(Foresight.get_output_schema(), indent=2))


@cli.command("models")
def models():
    """List the forecast models"""
    for name in Foresight.list_models():
        typer.echo(name)


if __name__ == "__main__":
    cli()
