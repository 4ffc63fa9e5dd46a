"""Text renderings of poems: the saved-file layout, Markdown and the greeting."""

from __future__ import annotations

from datetime import date
from html import escape
from typing import Iterable, List, Optional

from computer_poet import __version__
from computer_poet.core import GeneratedPoem

BANNER = "*" * 38
POET_NAME = "火鸟"
POET_BIRTHDAY = date(2002, 4, 4)


def poem_number_label(number: int) -> str:
    return f"{int(number):06d}"


def export_filename(number: int) -> str:
    return f"cp{poem_number_label(number)}.txt"


def format_poem_text(lines: Iterable[str], title: str, poem_number: int) -> str:
    """Render the layout of a saved poem file, trailing newline included."""

    output: List[str] = [
        BANNER,
        title,
        f"（作品第{poem_number_label(poem_number)}号）",
        BANNER,
    ]
    output.extend(lines)
    return "\n".join(output) + "\n"


def format_poem_markdown(poem: GeneratedPoem, poem_number: Optional[int] = None) -> str:
    if not poem.lines:
        return "_The poet has nothing to say._"

    output: List[str] = []
    if poem.title:
        output.append(f"### {escape(poem.title)}")
        if poem_number is not None:
            output.append(f"_（作品第{poem_number_label(poem_number)}号）_")
        output.append("")

    stanzas = poem.stanzas()
    for index, stanza in enumerate(stanzas):
        # Two trailing spaces keep the line breaks inside a Markdown paragraph.
        output.append("  \n".join(escape(line) for line in stanza))
        if index < len(stanzas) - 1:
            output.append("")
    return "\n".join(output)


def _months_between(start: date, end: date) -> int:
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return months


def poet_age_greeting(today: Optional[date] = None) -> str:
    """Introduce the poet by age in years, else months, else days."""

    today = today or date.today()
    months = _months_between(POET_BIRTHDAY, today)
    if months >= 12:
        return f"{months // 12}岁的计算机诗人{POET_NAME}将为您歌唱！"
    if months >= 1:
        return f"{months}个月大的计算机诗人{POET_NAME}将为您歌唱！"
    days = max(0, (today - POET_BIRTHDAY).days)
    return f"{days}天大的计算机诗人{POET_NAME}将为您歌唱！"


def version_banner(today: Optional[date] = None) -> str:
    rule = "≌" * 40
    return "\n".join(
        [
            rule,
            "",
            "　　听吧！",
            f"　　{poet_age_greeting(today)}",
            f"　　　　　　　　　　　　　　　　　　Version {__version__} (Python)",
            "生日：2002年4月4日",
            "星座：白羊座　　　　原作：刘慈欣",
            "籍贯：山西平定娘子关　改编：诸葛恒",
            "爱好：写诗",
            "",
            rule,
        ]
    )


__all__ = [
    "BANNER",
    "POET_BIRTHDAY",
    "export_filename",
    "poem_number_label",
    "format_poem_text",
    "format_poem_markdown",
    "poet_age_greeting",
    "version_banner",
]
