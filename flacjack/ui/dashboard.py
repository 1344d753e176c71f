from typing import Optional
from rich.console import Console, Group
from rich.live import Live
from rich.text import Text
from flacjack.config.models import UiConfig
from flacjack.domain.events import Event, ProgressEvent
from flacjack.infrastructure.event_bus import EventBus
from flacjack.ui.state import UIState


class Dashboard:
    """Live status view: error block, one line per worker slot, summary line.

    The view is rebuilt from UIState on every refresh instead of being patched,
    so it must be the only thing writing to the terminal while it is live.
    """

    def __init__(self, state: UIState, ui_config: Optional[UiConfig] = None, console: Optional[Console] = None):
        self.state = state
        self.ui_config = ui_config or UiConfig()
        self.console = console or Console()
        self._live: Optional[Live] = None

    # --- Formatters ---

    def format_time(self, seconds: float) -> str:
        """Format time: 59s, 01m 01s, 1h 01m."""
        if seconds is None:
            return "--:--"
        if seconds < 60:
            return f"{int(seconds)}s"
        if seconds < 3600:
            return f"{int(seconds // 60):02d}m {int(seconds % 60):02d}s"
        return f"{int(seconds // 3600)}h {int((seconds % 3600) // 60):02d}m"

    def _fit_name(self, filename: str) -> str:
        """Truncate long names to the name column: prefix…suffix."""
        max_len = self.ui_config.name_width
        if len(filename) <= max_len:
            return filename
        part_len = (max_len - 1) // 2
        return f"{filename[:part_len]}…{filename[-part_len:]}"

    # --- Render Logic ---

    def _render_slot(self, slot: int, event: Optional[ProgressEvent]) -> Text:
        line = Text(f"{slot:2d}: ")
        if event is None or event.is_idle:
            line.append("Idle")
            return line
        name = self._fit_name(event.source.name if event.source else "")
        line.append(f"{name:<{self.ui_config.name_width}} ")
        line.append(f"{event.stage:>{self.ui_config.stage_width}}", style="green")
        return line

    def _render_summary(self) -> Text:
        with self.state._lock:
            if self.state.discovery_finished:
                queued = str(self.state.files_to_process)
            else:
                queued = "scanning"
            parts = [
                ("queued", queued, "white"),
                ("converted", str(self.state.completed_count), "green"),
                ("failed", str(self.state.failed_count), "red"),
                ("already converted", str(self.state.already_converted_count), "dim white"),
            ]
            finished = self.state.finished
            status = "Finished" if finished else f"Workers: {self.state.live_workers}"
            elapsed = self.format_time(self.state.elapsed_seconds)

        summary = Text()
        for label, value, style in parts:
            summary.append(f"{label}:{value}", style=style)
            summary.append(" • ", style="dim")
        summary.append(f"{status} | {elapsed}", style="bold" if finished else "")
        return summary

    def create_display(self) -> Group:
        lines = []
        with self.state._lock:
            # Errors first so the slot lines never push them out of view
            for message in self.state.errors:
                lines.append(Text(message, style="red"))
            for slot, event in self.state.snapshot():
                lines.append(self._render_slot(slot, event))
        lines.append(self._render_summary())
        return Group(*lines)

    def refresh(self, event: Optional[Event] = None):
        """Re-renders the whole view; subscribed to every event on the bus."""
        if self._live:
            self._live.update(self.create_display(), refresh=True)

    def attach(self, bus: EventBus):
        bus.subscribe(Event, self.refresh)

    def start(self):
        self._live = Live(
            self.create_display(),
            console=self.console,
            auto_refresh=False,
            vertical_overflow="visible",
        )
        self._live.start(refresh=True)
        return self

    def stop(self):
        if self._live:
            self._live.update(self.create_display(), refresh=True)
            self._live.stop()
            self._live = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
