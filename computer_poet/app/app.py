"""Application wiring for the computer poet."""

from __future__ import annotations

import logging
import os
import random
from pathlib import Path
from typing import Optional

if __package__ in {None, ""}:
    import sys

    repo_root = Path(__file__).resolve().parents[2]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from computer_poet.core import JsonVocabularyStore, PoetryEngine, VocabularyStore
from computer_poet.utils.logging_config import configure_logging
from computer_poet.utils.observability import get_logger
from computer_poet.utils.telemetry import StructuredTelemetry, TelemetryLogger

from computer_poet.app.data.database import SQLitePoemArchive
from computer_poet.app.services.poetry_service import PoetryService

SHARE_ENV = "COMPUTER_POET_SHARE"


class ComputerPoetApp:
    """High-level application facade bundling dependencies."""

    def __init__(
        self,
        db_path: Optional[str] = None,
        *,
        data_dir: Optional[Path | str] = None,
        store: Optional[VocabularyStore] = None,
        archive: Optional[SQLitePoemArchive] = None,
        engine: Optional[PoetryEngine] = None,
        telemetry: Optional[StructuredTelemetry] = None,
        seed: Optional[int] = None,
    ) -> None:
        self._logger = get_logger(__name__).bind(component="app_facade")

        self.archive = archive or SQLitePoemArchive(db_path)
        self.db_path = self.archive.db_path
        self._logger.info("Initialising application facade", context={"db_path": self.db_path})
        try:
            row_count = self.archive.ensure_database()
        except Exception as exc:
            self._logger.error(
                "Poem archive initialisation failed",
                context={"db_path": self.db_path, "error": str(exc)},
            )
            raise
        else:
            self._logger.info(
                "Database ready",
                context={"db_path": self.db_path, "saved_poems": row_count},
            )

        self.store = store or JsonVocabularyStore(data_dir)
        rng = random.Random(seed) if seed is not None else None
        self.engine = engine or PoetryEngine(self.store, rng=rng)
        if telemetry is None:
            telemetry = StructuredTelemetry(listeners=[TelemetryLogger(level=logging.DEBUG)])
        self.telemetry = telemetry
        self.poetry_service = PoetryService(self.engine, self.archive, telemetry)

    # Public API ------------------------------------------------------------
    def generate_poem(self, *args, **kwargs):
        return self.poetry_service.generate_poem(*args, **kwargs)

    def save_poem(self, *args, **kwargs):
        return self.poetry_service.save_poem(*args, **kwargs)

    def create_gradio_interface(self):
        from computer_poet.app.ui.gradio import create_interface

        return create_interface(self.poetry_service)


def _should_share_interface() -> bool:
    """Return whether the Gradio UI should request a public share link."""

    env_value = os.environ.get(SHARE_ENV, "")
    if not env_value:
        return False
    return str(env_value).strip().lower() in {"1", "true", "yes", "on"}


def main() -> None:
    configure_logging()
    app = ComputerPoetApp()
    interface = app.create_gradio_interface()
    interface.launch(
        server_name="0.0.0.0",
        server_port=7860,
        share=_should_share_interface(),
    )


if __name__ == "__main__":
    main()


__all__ = ["ComputerPoetApp", "main"]
