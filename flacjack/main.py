import logging
import typer
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from flacjack.config.loader import load_config, apply_overrides
from flacjack.infrastructure.logging import setup_logging
from flacjack.infrastructure.event_bus import EventBus
from flacjack.infrastructure.housekeeping import HousekeepingService
from flacjack.pipeline.orchestrator import Orchestrator
from flacjack.ui.state import UIState
from flacjack.ui.manager import UIManager
from flacjack.ui.dashboard import Dashboard

app = typer.Typer(help="flacjack - convert a FLAC library to MP3")

@app.command()
def convert(
    input_path: Optional[Path] = typer.Option(
        None, "--input-path", "-i", help="The location of the FLAC files to convert"
    ),
    output_path: Optional[Path] = typer.Option(
        None, "--output-path", "-o", help="Where to put the translated files"
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", help="Number of concurrent conversions (default: CPU count)"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to YAML config"),
    log_path: Optional[Path] = typer.Option(
        None, "--log-path", help="Path to log file (default: <output-path>/conversion.log)"
    ),
    debug: bool = typer.Option(False, "--debug/--no-debug", help="Enable verbose debug logging"),
):
    """Convert every FLAC file without an MP3 counterpart."""
    try:
        try:
            config = load_config(config_path)
            config = apply_overrides(
                config,
                input_root=input_path,
                output_root=output_path,
                workers=workers,
                log_path=log_path,
                debug=True if debug else None,
            )
        except (FileNotFoundError, ValidationError, ValueError) as exc:
            typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

        general = config.general
        logger = setup_logging(general.output_root, debug=general.debug, log_path=general.log_path)
        logger.info(
            f"flacjack started: input={general.input_root}, output={general.output_root}, "
            f"workers={general.workers}"
        )
        logger.info(f"Tools: metaflac={config.tools.metaflac}, flac={config.tools.flac}, lame={config.tools.lame}")

        HousekeepingService().cleanup_partial_outputs(general.output_root, general.target_extension)

        bus = EventBus()
        ui_state = UIState(worker_count=general.workers)
        UIManager(bus, ui_state)
        dashboard = Dashboard(ui_state, config.ui)
        dashboard.attach(bus)

        orchestrator = Orchestrator.from_config(config, bus)

        typer.echo(f"Starting FLAC converter with {general.workers} workers")
        with dashboard:
            orchestrator.run()

        logger.info(
            f"flacjack finished: converted={ui_state.completed_count}, failed={ui_state.failed_count}, "
            f"already_converted={ui_state.already_converted_count}"
        )

    except KeyboardInterrupt:
        typer.secho("\nConversion stopped by user (Ctrl+C)", fg=typer.colors.YELLOW)
        raise typer.Exit(code=130)

    except typer.Exit:
        raise

    except Exception as e:
        logging.getLogger(__name__).exception("Fatal error")
        typer.secho(f"Fatal Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

if __name__ == "__main__":
    app()
