"""Service layer wrapping the poetry engine with persistence and telemetry."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from computer_poet.core import GeneratedPoem, GenerationOptions, PoetryEngine, PoeticStyle

from ..data.database import SQLitePoemArchive
from ...utils.observability import (
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)
from ...utils.telemetry import StructuredTelemetry
from .poem_formatter import format_poem_markdown


class PoetryService:
    """Generates, saves and exports poems on behalf of the CLI and the UI."""

    def __init__(
        self,
        engine: PoetryEngine,
        archive: Optional[SQLitePoemArchive] = None,
        telemetry: Optional[StructuredTelemetry] = None,
    ) -> None:
        self.engine = engine
        self.archive = archive
        self.telemetry = telemetry or StructuredTelemetry()
        self._latest_trace: Dict[str, Any] = {}
        self._logger = get_logger(__name__).bind(
            component="poetry_service",
            archive=type(archive).__name__ if archive is not None else None,
        )

        self._metric_request_total = create_counter(
            "poet_generation_requests_total",
            "Total poem generation requests received.",
            label_names=("style",),
        )
        self._metric_request_failures = create_counter(
            "poet_generation_failures_total",
            "Poem generation requests that raised an exception.",
            label_names=("style",),
        )
        self._metric_request_duration = create_histogram(
            "poet_generation_seconds",
            "Latency of poem generation requests.",
        )
        self._metric_saved = create_counter(
            "poet_poems_saved_total",
            "Poems written to the archive.",
        )

    def get_latest_telemetry(self) -> Dict[str, Any]:
        """Return the most recent telemetry snapshot for the service."""

        if self._latest_trace:
            return dict(self._latest_trace)
        return self.telemetry.latest_snapshot()

    def generate_poem(
        self,
        style: PoeticStyle | str = PoeticStyle.BOLD,
        stanza_count: int = 1,
        lines_per_stanza: int = 4,
        use_rhyme: bool = False,
        rhyme_scheme: Optional[str] = None,
    ) -> GeneratedPoem:
        """Validate the request and write one poem.

        Invalid options raise :class:`InvalidOptionsError` before anything is
        recorded; generation failures are logged, counted and re-raised.
        """

        options = GenerationOptions(
            style=style,
            stanza_count=stanza_count,
            lines_per_stanza=lines_per_stanza,
            use_rhyme=use_rhyme,
            rhyme_scheme=rhyme_scheme,
        )
        request_context = options.as_dict()
        telemetry = self.telemetry
        telemetry.start_trace("generate_poem")
        telemetry.increment("poem.invoked")
        for key, value in request_context.items():
            telemetry.annotate(f"input.{key}", value)

        self._metric_request_total.labels(style=options.style.value).inc()
        self._logger.info("Poem request received", context=request_context)

        fallbacks_before = self.engine.structure_generator.fallback_count
        with start_span("poem.generate", request_context) as span:
            try:
                with self._metric_request_duration.time():
                    with telemetry.timer("poem.generate") as timing:
                        poem = self.engine.generate(options)
                        timing["lines"] = len(poem.lines)
            except Exception as exc:
                failure_context = dict(request_context)
                failure_context["error"] = str(exc)
                self._metric_request_failures.labels(style=options.style.value).inc()
                self._logger.error("Poem request failed", context=failure_context)
                record_exception(span, exc)
                telemetry.increment("poem.failed")
                self._latest_trace = telemetry.snapshot()
                raise

            fallbacks = self.engine.structure_generator.fallback_count - fallbacks_before
            telemetry.annotate("result.lines", len(poem.lines))
            telemetry.annotate("result.template_fallbacks", fallbacks)
            telemetry.increment("poem.completed")
            self._latest_trace = telemetry.snapshot()
            add_span_attributes(
                span,
                {"poem.success": True, "poem.lines": len(poem.lines)},
            )
            self._logger.info(
                "Poem request completed",
                context={"lines": len(poem.lines), "template_fallbacks": fallbacks},
            )
            return poem

    def save_poem(
        self,
        poem: GeneratedPoem,
        title: str,
        export_dir: Optional[Path | str] = None,
    ) -> Dict[str, Any]:
        """Archive ``poem`` and optionally export it as a text file.

        Returns ``{"poem_number": int, "path": Optional[Path]}``.
        """

        if self.archive is None:
            raise RuntimeError("No poem archive is configured")

        with start_span("poem.save", {"title": title}) as span:
            try:
                number = self.archive.save_poem(poem, title)
                path = self.archive.export_text(number, export_dir) if export_dir else None
            except Exception as exc:
                self._logger.error(
                    "Saving poem failed",
                    context={"title": title, "error": str(exc)},
                )
                record_exception(span, exc)
                raise
            add_span_attributes(span, {"poem.number": number})

        self._metric_saved.inc()
        self.telemetry.increment("poem.saved")
        return {"poem_number": number, "path": path}

    def format_poem(self, poem: GeneratedPoem, poem_number: Optional[int] = None) -> str:
        return format_poem_markdown(poem, poem_number)


__all__ = ["PoetryService"]
