import json
import logging
from contextlib import contextmanager
from pathlib import Path

import click

from jdindex import api
from jdindex.completion import JD_NUMBER
from jdindex.config import get_setting, load_config
from jdindex.exceptions import JDError
from jdindex.models import JDNumber, PathLocation
from jdindex.system import JDSystem

LOG_FORMAT = "%(levelname)s - [%(name)s] - %(message)s"

SHELL_SNIPPETS = {
    "bash": """
function j(){
    cd $(jd cd "$@")
}
""",
    "zsh": """
function j(){
    cd $(jd cd "$@")
}
""",
    "fish": """
function j
    pushd $(jd cd $argv)
end
""",
}

KNOWN_SHELLS = ["bash", "elvish", "fish", "nushell", "posix", "powershell", "xonsh", "zsh"]


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        force=True,
    )


def _color(settings):
    # None lets click strip styles when not writing to a terminal
    return None if get_setting(settings, "color", True) else False


def echo(settings, message="", **kwargs):
    click.echo(message, color=_color(settings), **kwargs)


def fail(settings, message):
    """Print an error and exit."""
    echo(settings, f"{click.style('Error:', fg='magenta')} {message}", err=True)
    raise SystemExit(1)


@contextmanager
def reported_errors(settings):
    try:
        yield
    except JDError as e:
        fail(settings, e.message)


def get_system(settings) -> JDSystem:
    """Load the index of the system the current directory is in."""
    return api.get_system(Path.cwd(), settings["index_filename"])


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log what jd is doing.")
@click.pass_context
def cli(ctx, verbose):
    """Johnny.Decimal index: find and file things by number."""
    setup_logging(verbose)
    ctx.obj = load_config()


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_obj
def index(settings, path):
    """Index an existing Johnny.Decimal system rooted at PATH."""
    def report(number):
        echo(settings, f"{click.style('Indexing', fg='green')} {number}")

    with reported_errors(settings):
        system = api.index_directory(path, on_add=report)
        index_path = Path(system.path) / settings["index_filename"]
        api.write_index(system, index_path)
    echo(settings, f"Index has been written to {index_path}")


@cli.command()
@click.argument("item", type=JD_NUMBER, required=False)
@click.pass_obj
def show(settings, item):
    """Show part or all of the system.

    \b
    ITEM is part or all of a JD number:
        jd show 101.22.02   → a single number (also AC.ID)
        jd show 22          → a category (also PRO.AC)
        jd show 101         → a project
        jd show             → everything
    Anything else also shows everything.
    """
    with reported_errors(settings):
        system = get_system(settings)
        output = system.display(item)
    echo(settings, output, nl=False)


@cli.command("list")
@click.pass_obj
def list_cmd(settings):
    """List every JD number in the index."""
    with reported_errors(settings):
        system = get_system(settings)
    for number in system:
        echo(settings, str(number))


@cli.command()
@click.pass_obj
def display(settings):
    """Show the whole system as a tree (same as `jd show` with no ITEM)."""
    with reported_errors(settings):
        system = get_system(settings)
    echo(settings, system.display(), nl=False)


@cli.command()
@click.argument("term", type=JD_NUMBER)
@click.pass_obj
def cd(settings, term):
    """Print the folder of a JD number (used by the `j` shell function)."""
    with reported_errors(settings):
        system = get_system(settings)
        number = system.get_id(JDNumber.from_str(term))
    echo(settings, str(Path(system.path) / number.relative_path))


@cli.command()
@click.argument("category", type=JD_NUMBER)
@click.argument("title")
@click.option("--sep", "separator", default=None,
              help="Put between the number and TITLE. Default: from config ('_').")
@click.option("--mkdir", is_flag=True, help="Also create the folder.")
@click.pass_obj
def add(settings, category, title, separator, mkdir):
    """Add the next JD number in a category.

    \b
    Examples:
        jd add 12 payslips        → 12.03_payslips (after 12.02)
        jd add 101.22 lab_report  → 101.22.05_lab_report
    """
    if separator is None:
        separator = get_setting(settings, "separator", "_")
    with reported_errors(settings):
        index_path = api.find_index_for_write(Path.cwd(), settings["index_filename"])
        system = api.read_index(index_path)
        number = system.add_id_from_str(category, f"{separator}{title}")
        folder = Path(str(number.path))
        # Nothing is saved if the folder can't be created
        if mkdir and folder.exists():
            fail(settings, f"Destination already exists: {folder}")
        api.write_index(system, index_path)
    echo(settings, f"Added: {number}")

    if mkdir:
        folder.mkdir(parents=True)
        echo(settings, f"Created: {folder}")


@cli.command()
@click.argument("shell", type=click.Choice(KNOWN_SHELLS))
@click.pass_obj
def init(settings, shell):
    """Print the `j` function for SHELL's config file."""
    text = SHELL_SNIPPETS.get(shell)
    if text is None:
        fail(settings, "Unsupported shell. The list of supported shells is currently "
                       "bash, zsh, and fish.")

    if click.get_text_stream("stdout").isatty():
        echo(settings,
             f"{click.style('Warning:', fg='yellow')} This command is not meant to be used "
             f"in the terminal. Use it in your shell config to set up the ability to cd "
             f"to Johnny.Decimal numbers.\n\nHere is what would normally be output:")
    echo(settings, text)


@cli.command()
@click.argument("source", type=click.File("r"))
@click.option("--root", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Root folder of the system. Default: current directory.")
@click.option("--write", is_flag=True, help="Save the parsed system as the index at --root.")
@click.pass_obj
def parse(settings, source, root, write):
    """Parse a system outline from SOURCE ('-' for stdin) and show it.

    \b
    The outline lists one entry per line; indentation is optional:
        10-19_finance
            12_payroll
                12.01_oct_payroll
    """
    with reported_errors(settings):
        system = JDSystem.parse(source.read())
        if write:
            root = (root or Path.cwd()).resolve()
            system.path = str(root)
            for number in system:
                number.path = PathLocation(root / number.relative_path)
            index_path = root / settings["index_filename"]
            api.write_index(system, index_path)
    echo(settings, system.display(), nl=False)
    if write:
        echo(settings, f"Index has been written to {index_path}")


@cli.command("json")
@click.pass_obj
def json_cmd(settings):
    """Print the index as JSON."""
    with reported_errors(settings):
        system = get_system(settings)
    echo(settings, json.dumps(system.to_dict(), indent=2))


if __name__ == "__main__":
    cli()
