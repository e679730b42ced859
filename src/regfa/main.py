import json
import logging
from typing import IO, Optional

import click
from tqdm import tqdm

from regfa.compiler import compile_pattern
from regfa.pattern import render
from regfa.serializer import PatternDecodeError, loads


@click.command(
    name="regfa", help="Compile a JSON pattern tree to an NFA and test strings on it"
)
@click.argument("pattern", type=click.STRING)
@click.option(
    "--text", "-t", type=click.STRING, multiple=True, help="text to test, repeatable"
)
@click.option(
    "--input-file",
    type=click.File(),
    default=None,
    help="Input file, every line is tested",
)
@click.option(
    "--out", "-o", type=click.File("w"), default="-", help="Output of the results"
)
@click.option(
    "--render",
    "-r",
    "show_rendered",
    is_flag=True,
    show_default=True,
    default=False,
    help="Print the pattern in linear notation",
)
@click.option(
    "--json",
    "-j",
    "show_json",
    is_flag=True,
    show_default=True,
    default=False,
    help="Print the compiled NFA as JSON",
)
@click.option(
    "--graph",
    "-g",
    "directory",
    type=click.Path(file_okay=False),
    default=None,
    help="Render the compiled NFA with graphviz into this directory",
)
@click.option(
    "--debug",
    "-d",
    is_flag=True,
    show_default=True,
    default=False,
    help="Turn on debug mode",
)
def entry(
    pattern: str,
    text: tuple[str, ...],
    input_file: Optional[IO],
    out: IO,
    show_rendered: bool,
    show_json: bool,
    directory: Optional[str],
    debug: bool,
):
    if debug:
        logging.basicConfig(level=logging.DEBUG)

    try:
        tree = loads(pattern)
    except PatternDecodeError as e:
        raise click.BadParameter(str(e), param_hint="PATTERN") from e

    design = compile_pattern(tree)

    if show_rendered:
        click.echo(render(tree), file=out)
    if show_json:
        click.echo(design.to_json(), file=out)
    if directory is not None:
        design.graph().render(directory=directory, filename="nfa")

    texts = list(text)
    if input_file is not None:
        texts.extend(line.rstrip("\n") for line in input_file)

    if texts:
        results = {t: design.accepts(t) for t in tqdm(texts, disable=not debug)}
        click.echo(json.dumps(results, indent=4), file=out)


if __name__ == "__main__":
    entry()
