import logging
from datetime import datetime
from flacjack.infrastructure.event_bus import EventBus
from flacjack.ui.state import UIState
from flacjack.domain.events import (
    DiscoveryFinished, ProcessingFinished, ProgressEvent, WorkerFinished
)

class UIManager:
    """Subscribes to EventBus and updates UIState."""

    def __init__(self, bus: EventBus, state: UIState):
        self.bus = bus
        self.state = state
        self.logger = logging.getLogger(__name__)
        self._setup_subscriptions()

    def _setup_subscriptions(self):
        self.bus.subscribe(ProgressEvent, self.on_progress)
        self.bus.subscribe(DiscoveryFinished, self.on_discovery_finished)
        self.bus.subscribe(WorkerFinished, self.on_worker_finished)
        self.bus.subscribe(ProcessingFinished, self.on_processing_finished)

    def on_progress(self, event: ProgressEvent):
        self.state.update_slot(event)

    def on_discovery_finished(self, event: DiscoveryFinished):
        self.logger.debug(
            f"UI: Updating discovery counters: found={event.files_found}, "
            f"to_process={event.files_to_process}, already_converted={event.already_converted}"
        )
        with self.state._lock:
            self.state.files_found = event.files_found
            self.state.files_to_process = event.files_to_process
            self.state.already_converted_count = event.already_converted
            self.state.discovery_finished = True
        if event.errors:
            self.state.add_errors(event.errors)

    def on_worker_finished(self, event: WorkerFinished):
        self.state.worker_finished()

    def on_processing_finished(self, event: ProcessingFinished):
        with self.state._lock:
            self.state.finished = True
            self.state.finished_time = datetime.now()
