"""Command-line front end of the computer poet.

Without arguments (or with ``-i``) the poet asks for its settings in a
question-and-answer session; otherwise it writes one poem from the flags and
exits.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TextIO

from computer_poet import __version__
from computer_poet.app.app import ComputerPoetApp
from computer_poet.app.services.poem_formatter import format_poem_text, version_banner
from computer_poet.core import GeneratedPoem, PoetryError
from computer_poet.core.rhyme import RHYME_PROMPT_HINT, RHYME_SCHEMES, normalize_rhyme_scheme
from computer_poet.utils.logging_config import configure_logging
from computer_poet.utils.observability import get_logger

DEFAULT_POEMS_DIR = "poems"
RULE = "=" * 37

_logger = get_logger(__name__).bind(component="cli")

InputFn = Callable[[str], str]


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="computer-poet",
        description="计算机诗人火鸟: template-driven Chinese verse.",
        epilog=f"Rhyme classes: {', '.join(RHYME_SCHEMES)}",
    )
    parser.add_argument(
        "-s",
        "--style",
        type=str.lower,
        choices=["quiet", "bold"],
        default="bold",
        help="quiet (宁静) keeps lines short, bold (奔放) uses every template. Default: bold.",
    )
    parser.add_argument(
        "-p",
        "--stanzas",
        type=int,
        default=1,
        help="Number of stanzas. Default: 1.",
    )
    parser.add_argument(
        "-l",
        "--lines",
        type=int,
        default=4,
        help="Lines per stanza. Default: 4.",
    )
    parser.add_argument(
        "-r",
        "--rhyme",
        nargs="?",
        const="",
        default=None,
        metavar="SCHEME",
        help="Enable rhyme, optionally restricted to one rhyme class.",
    )
    parser.add_argument("-t", "--title", help="Title; the poem is archived when given.")
    parser.add_argument(
        "-o",
        "--output",
        metavar="DIR",
        help="Archive the poem and write cpNNNNNN.txt into DIR.",
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Ask for the settings interactively.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible poems.")
    parser.add_argument("--db", metavar="PATH", default=None, help="Poem archive database.")
    parser.add_argument(
        "--data-dir",
        metavar="DIR",
        default=None,
        help="Directory holding the vocabulary tables.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_yes(answer: str) -> bool:
    return answer.strip().upper() == "Y"


def _parse_count(answer: str, default: int) -> int:
    try:
        value = int(answer.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def _print_poem(poem: GeneratedPoem, out: TextIO) -> None:
    print(RULE, file=out)
    for line in poem.lines:
        print(f"  {line}", file=out)
    print(RULE, file=out)


def _save(
    app: ComputerPoetApp,
    poem: GeneratedPoem,
    title: str,
    export_dir: Optional[Path | str],
) -> tuple[int, Optional[Path]]:
    result = app.save_poem(poem, title, export_dir=export_dir)
    return result["poem_number"], result["path"]


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def run_command_mode(app: ComputerPoetApp, args: argparse.Namespace, out: TextIO) -> int:
    use_rhyme = args.rhyme is not None
    rhyme_scheme = normalize_rhyme_scheme(args.rhyme) if args.rhyme else None

    try:
        print("正在生成诗歌，请稍候...", file=out)
        poem = app.generate_poem(
            style=args.style,
            stanza_count=args.stanzas,
            lines_per_stanza=args.lines,
            use_rhyme=use_rhyme,
            rhyme_scheme=rhyme_scheme,
        )
    except PoetryError as exc:
        print(f"生成诗歌时出错：{exc}", file=sys.stderr)
        return 1

    print("\n生成的诗歌：", file=out)
    _print_poem(poem, out)

    if args.title or args.output:
        title = args.title or "无题"
        number, path = _save(app, poem, title, args.output)
        if path is not None:
            print(f"\n诗歌已保存到：{path}", file=out)
        else:
            print("\n保存格式预览：", file=out)
            print(format_poem_text(poem.lines, title, number), file=out)
    return 0


def run_interactive_mode(
    app: ComputerPoetApp,
    input_fn: InputFn,
    out: TextIO,
    poems_dir: Path | str = DEFAULT_POEMS_DIR,
) -> int:
    while True:
        print("\n请输入以下内容，以使我的创作多少有点根据：", file=out)
        style = "quiet" if _is_yes(input_fn("你要宁静的风格吗？（反之则是奔放的风格）[Y/N]: ")) else "bold"
        stanzas = _parse_count(input_fn("分多少段（请输入数字，输入1为不分段）？: "), 1)
        lines_prompt = "您让我作多少行的诗呢（请输入数字）？: " if stanzas == 1 else "每段多少行（请输入数字）？: "
        lines = _parse_count(input_fn(lines_prompt), 4)

        use_rhyme = _is_yes(input_fn("需要押韵吗（最好不要，因为押韵后灵感会受到一定束缚）[Y/N]？: "))
        rhyme_scheme: Optional[str] = None
        if use_rhyme:
            print("请输入韵脚(v代表ü, r代表知、吃、诗、日的韵母, z代表资、雌、思的韵母)", file=out)
            answer = normalize_rhyme_scheme(input_fn(f"[选择以下之一：{RHYME_PROMPT_HINT}]: "))
            if answer and answer not in RHYME_SCHEMES:
                print(f"不认识的韵脚“{answer}”，这次就不限韵脚了。", file=out)
                answer = ""
            rhyme_scheme = answer or None

        print("\n正在生成诗歌，请稍候...", file=out)
        try:
            poem = app.generate_poem(
                style=style,
                stanza_count=stanzas,
                lines_per_stanza=lines,
                use_rhyme=use_rhyme,
                rhyme_scheme=rhyme_scheme,
            )
        except PoetryError as exc:
            _logger.error("Interactive generation failed", context={"error": str(exc)})
            print(f"生成诗歌时出错：{exc}", file=out)
        else:
            print("\n诗已全部写完了，请欣赏吧！", file=out)
            _print_poem(poem, out)
            if _is_yes(input_fn("\n满意吗？[Y/N]: ")):
                title = input_fn("请赐题：").strip() or "无题"
                to_file = _is_yes(input_fn("保存到文件吗？[Y/N]（N为仅显示内容）: "))
                number, path = _save(app, poem, title, poems_dir if to_file else None)
                if path is not None:
                    print("好，我将它存起来，以供以后欣赏……", file=out)
                    print(f"\n诗歌已保存到：{path}", file=out)
                else:
                    print("好，我将它记录下来，以供以后欣赏……", file=out)
                    print("\n保存的内容：", file=out)
                    print(format_poem_text(poem.lines, title, number), file=out)
            else:
                print("唉，那我就把它扔到纸篓里了！", file=out)

        if not _is_yes(input_fn("\n再作一首如何？没关系，不费劲儿的！[Y/N]: ")):
            break

    print("\n那么，我先歇歇喝口水啦！", file=out)
    return 0


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    app: Optional[ComputerPoetApp] = None,
    input_fn: InputFn = input,
    out: Optional[TextIO] = None,
) -> int:
    out = out or sys.stdout
    raw_args: List[str] = list(sys.argv[1:] if argv is None else argv)
    args = _build_arg_parser().parse_args(raw_args)

    configure_logging(args.log_level)
    if app is None:
        app = ComputerPoetApp(args.db, data_dir=args.data_dir, seed=args.seed)

    print(version_banner(), file=out)
    interactive = args.interactive or not raw_args
    try:
        if interactive:
            return run_interactive_mode(app, input_fn, out, args.output or DEFAULT_POEMS_DIR)
        return run_command_mode(app, args, out)
    except EOFError:
        print("\n那么，我先歇歇喝口水啦！", file=out)
        return 0
    except KeyboardInterrupt:
        print("\n那么，我先歇歇喝口水啦！", file=out)
        return 130


if __name__ == "__main__":
    sys.exit(main())
