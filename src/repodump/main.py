import sys
from pathlib import Path

import click

from repodump import __version__
from repodump.dump import DEFAULT_OUTPUT, RepoDumper, format_summary, write_output
from repodump.errors import RepodumpError
from repodump.resolver import resolve_target_directory


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("path", required=False, type=click.Path(path_type=Path))
@click.option("--output", "-o", type=click.Path(path_type=Path), default=DEFAULT_OUTPUT, show_default=True, help="Output file path.")
@click.option("--tree", "-t", "tree_only", is_flag=True, help="Only include the directory structure but not the file contents.")
@click.option("--contents", "-c", "contents_only", is_flag=True, help="Only include the file contents but not the directory structure.")
@click.option("--ignore-gitignore", "-g", is_flag=True, help="Ignore .gitignore files.")
@click.option("--filter", "-f", "filters", multiple=True, metavar="PATTERN", help="Only include files matching any of these patterns.")
@click.option("--exclude", "-e", "excludes", multiple=True, metavar="PATTERN", help="Exclude files matching any of these patterns.")
@click.option("--include", "-i", "includes", multiple=True, metavar="PATTERN", help="Include files matching any of these patterns, overriding exclusions.")
@click.option("--prune-tree", "-p", is_flag=True, help="Apply filter and exclusion patterns to the directory structure tree.")
@click.option("--prompt", "-m", default=None, help="Add prompt text at the bottom of the output file.")
@click.option("--quiet", "-q", is_flag=True, help="Do not output a summary to stdout.")
@click.option("--verbose", "-v", is_flag=True, help="Report the resolved directory and unreadable files on stderr.")
@click.version_option(__version__, prog_name="repodump")
def cli(path, output, tree_only, contents_only, ignore_gitignore, filters, excludes, includes,
        prune_tree, prompt, quiet, verbose):
    """Generate LLM-friendly text files from directories and git repositories."""
    try:
        # Patterns are compiled before the filesystem is touched
        dumper = RepoDumper.from_patterns(
            filter=filters,
            exclude=excludes,
            include=includes,
            prune_tree=prune_tree,
            respect_ignore_files=not ignore_gitignore,
        )
        target_dir = resolve_target_directory(path)

        if verbose:
            click.echo(f"Dumping {target_dir} "
                       f"({len(filters)} filter, {len(excludes)} exclude, {len(includes)} include patterns)", err=True)

        def _report_unreadable(relative_path):
            if verbose:
                click.echo(click.style(f"Unreadable, using placeholder: {relative_path}", fg="yellow"), err=True)

        result = dumper.dump(
            target_dir,
            tree=not contents_only,
            contents=not tree_only,
            prompt=prompt,
            show_progress=not quiet,
            on_unreadable=_report_unreadable,
        )
        write_output(output, result.text)
    except RepodumpError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    if not quiet:
        click.echo(format_summary(target_dir, result))


if __name__ == '__main__':
    cli()
