"""User interface assembly for the Gradio front-end."""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import gradio as gr

from computer_poet.core import RHYME_SCHEMES, GeneratedPoem, PoetryError

from ..services.poem_formatter import poet_age_greeting
from ..services.poetry_service import PoetryService

_NO_RHYME_CHOICE = "(any)"


def _format_live_events(snapshot: Dict[str, Any]) -> str:
    """Return a markdown representation of the telemetry of the last poem."""

    if not snapshot:
        return ""

    events = snapshot.get("events") or []
    counters = snapshot.get("counters") or {}
    if not events and not counters:
        return ""

    output: List[str] = ["#### Generation activity"]
    if events:
        output.append("")
        for event in events[-8:]:
            name = str(event.get("name", "event"))
            duration = event.get("duration")
            metadata = event.get("metadata") or {}
            meta_chunks = [f"{key}={value}" for key, value in metadata.items()]
            meta_suffix = f" ({', '.join(meta_chunks)})" if meta_chunks else ""
            if isinstance(duration, (float, int)):
                output.append(f"- `{name}` took {float(duration) * 1000:.1f}ms{meta_suffix}")
            else:
                output.append(f"- `{name}`{meta_suffix}")

    if counters:
        output.append("")
        output.append("**Counters**")
        output.append(", ".join(f"`{key}`: {value:g}" for key, value in counters.items()))

    return "\n".join(output)


def create_interface(service: PoetryService) -> gr.Blocks:
    """Construct the interactive Gradio Blocks UI."""

    def generate_interface(
        style: str,
        stanza_count: float,
        lines_per_stanza: float,
        use_rhyme: bool,
        rhyme_scheme: Optional[str],
    ):
        scheme = None if not rhyme_scheme or rhyme_scheme == _NO_RHYME_CHOICE else rhyme_scheme
        start_time = time.perf_counter()
        try:
            poem = service.generate_poem(
                style=style,
                stanza_count=int(stanza_count),
                lines_per_stanza=int(lines_per_stanza),
                use_rhyme=bool(use_rhyme),
                rhyme_scheme=scheme,
            )
        except PoetryError as exc:
            return (
                f"Generation failed: {exc}",
                _format_live_events(service.get_latest_telemetry()),
                "",
                None,
            )

        elapsed = time.perf_counter() - start_time
        return (
            f"Poem written in {elapsed * 1000:.1f}ms",
            _format_live_events(service.get_latest_telemetry()),
            service.format_poem(poem),
            poem,
        )

    def save_interface(poem: Optional[GeneratedPoem], title: str):
        if poem is None:
            return "Write a poem before saving it.", ""
        if service.archive is None:
            return "Saving is disabled: no archive is configured.", service.format_poem(poem)
        try:
            result = service.save_poem(poem, title)
        except Exception as exc:  # pragma: no cover - surface UI level failures
            return f"Save failed: {exc}", service.format_poem(poem)
        number = result["poem_number"]
        return f"Saved as poem #{number:06d}.", service.format_poem(poem, number)

    with gr.Blocks(title="Computer Poet", theme=gr.themes.Soft()) as interface:
        gr.Markdown(f"<h2>计算机诗人</h2>\n<p>{poet_age_greeting()}</p>")
        poem_state = gr.State(None)

        with gr.Row():
            with gr.Column(scale=1, min_width=240):
                gr.Markdown("### Settings")
                style_input = gr.Radio(
                    choices=["bold", "quiet"],
                    value="bold",
                    label="Style",
                    info="Quiet keeps every line short",
                )
                stanza_input = gr.Slider(minimum=1, maximum=8, value=1, step=1, label="Stanzas")
                lines_input = gr.Slider(
                    minimum=1, maximum=12, value=4, step=1, label="Lines per stanza"
                )
                rhyme_input = gr.Checkbox(value=False, label="Rhyme")
                scheme_input = gr.Dropdown(
                    choices=[_NO_RHYME_CHOICE, *RHYME_SCHEMES],
                    value=_NO_RHYME_CHOICE,
                    label="Rhyme class",
                )
                generate_btn = gr.Button("Write a poem", variant="primary")

            with gr.Column(scale=2):
                status_md = gr.Markdown(value="Choose the settings and press **Write a poem**.")
                poem_md = gr.Markdown()
                with gr.Row():
                    title_input = gr.Textbox(label="Title", placeholder="请赐题", lines=1)
                    save_btn = gr.Button("Save")
                log_md = gr.Markdown()

        generate_btn.click(
            fn=generate_interface,
            inputs=[style_input, stanza_input, lines_input, rhyme_input, scheme_input],
            outputs=[status_md, log_md, poem_md, poem_state],
        )
        save_btn.click(
            fn=save_interface,
            inputs=[poem_state, title_input],
            outputs=[status_md, poem_md],
        )

    return interface


__all__ = ["create_interface"]
