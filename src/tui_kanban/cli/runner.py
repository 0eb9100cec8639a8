"""Interactive loop: terminal input in, frames out."""

from __future__ import annotations

import logging
from typing import Optional

from tui_kanban.cli.core.input import InputReader
from tui_kanban.cli.core.terminal import Terminal
from tui_kanban.cli.render import BoardRenderer
from tui_kanban.engine import Engine, Resize, Tick, ViewModel

logger = logging.getLogger(__name__)


class BoardApp:
    """
    Full-screen board.

    The loop reads one event (or times out and sends a Tick), lets the
    engine apply finished background work, and redraws only when the
    frame changed.
    """

    FRAME_TIMEOUT = 0.1  # seconds between ticks when idle

    def __init__(
        self,
        engine: Engine,
        reader: Optional[InputReader] = None,
        renderer: Optional[BoardRenderer] = None,
    ) -> None:
        self.engine = engine
        self.input = reader or InputReader()
        self.renderer = renderer or BoardRenderer()
        self._last_view: Optional[ViewModel] = None
        self._size: tuple[int, int] = (0, 0)

    def run(self, reset: bool = False, check_updates: bool = True) -> None:
        """Main application loop."""
        view = self.engine.start(reset=reset, check_updates=check_updates)
        with Terminal.managed_mode():
            try:
                while self.engine.running:
                    view = self._check_resize() or view
                    self._draw(view)
                    event = self.input.read(timeout=self.FRAME_TIMEOUT)
                    view = self.engine.handle(event if event is not None else Tick())
                    if self.engine.pump():
                        view = self.engine.view()
            finally:
                self.engine.shutdown()
        logger.info("Board closed")

    def _check_resize(self) -> Optional[ViewModel]:
        size = Terminal.size()
        current = (size.cols, size.rows)
        if current == self._size:
            return None
        self._size = current
        return self.engine.handle(Resize(size.cols, size.rows))

    def _draw(self, view: ViewModel) -> None:
        if view == self._last_view:
            return
        self._last_view = view
        Terminal.draw(self.renderer.render(view))


def run_board(engine: Engine, reset: bool = False, check_updates: bool = True) -> None:
    """Launch the interactive board."""
    BoardApp(engine).run(reset=reset, check_updates=check_updates)
