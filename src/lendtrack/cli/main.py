"""Main CLI entry point."""

import logging

import click
from lendtrack.storage.factories import (
    DATA_DIR_ENV_VAR,
    create_attachment_store,
    create_json_store,
    create_ledger_config,
)

# Import and register all commands at module level
from lendtrack.cli.commands import (
    add,
    attach,
    balances,
    deadline,
    people,
    timeline,
    transaction,
)


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    help=f"Directory holding the ledger, backups and attachments (overrides {DATA_DIR_ENV_VAR})",
    envvar=DATA_DIR_ENV_VAR,
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, data_dir: str | None, verbose: bool):
    """Lendtrack - Personal lending ledger.

    Record money lent, borrowed, returned and repaid, and see who still
    owes what and how reliably people pay back.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Load the ledger only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        config = create_ledger_config(data_dir)
        store = create_json_store(config)
        ctx.obj["config"] = config
        ctx.obj["store"] = store
        ctx.obj["attachments"] = create_attachment_store(config)
        ctx.obj["ledger"] = store.load()


# Register all commands
add.register_commands(cli)
transaction.register_commands(cli)
deadline.register_commands(cli)
attach.register_commands(cli)
balances.register_commands(cli)
people.register_commands(cli)
timeline.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
