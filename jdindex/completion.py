"""Custom shell completion for JD numbers, read from the index."""

import click
from click.shell_completion import CompletionItem
from pathlib import Path


def get_jd_completions(ctx, param, incomplete):
    """
    Complete projects, categories and JD numbers.

    - "" → every project, category and number in the index
    - "2" → categories 20-29 and their numbers (22, 22.01, ...)
    - "22." → all numbers in category 22
    - "101." → categories and numbers of project 101
    """
    from jdindex import api
    from jdindex.config import load_config

    try:
        system = api.get_system(Path.cwd(), load_config()["index_filename"])
    except Exception:
        return []

    completions = []
    seen = set()

    def offer(value, help_text):
        if value.startswith(incomplete) and value not in seen:
            seen.add(value)
            completions.append(CompletionItem(value, help=help_text))

    for n in system:
        if n.project is not None:
            offer(f"{n.project:03d}", n.project_label)
            offer(f"{n.project:03d}.{n.category:02d}", n.category_label)
        else:
            offer(f"{n.category:02d}", n.category_label)
        # Disambiguate generic names with the category they sit in
        offer(n.number, f"{n.category_label} > {n.label}")

    return completions


class JDNumberType(click.ParamType):
    """Click parameter type with JD number completion."""
    name = "jd_number"

    def shell_complete(self, ctx, param, incomplete):
        return get_jd_completions(ctx, param, incomplete)

    def convert(self, value, param, ctx):
        return value


JD_NUMBER = JDNumberType()
