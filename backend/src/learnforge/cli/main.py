"""LearnForge CLI entry point."""

import os

import click


@click.group()
def cli():
    """LearnForge e-learning backend CLI."""
    pass


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=lambda: int(os.environ.get("LEARNFORGE_PORT", "8000")), type=int)
@click.option("--reload", is_flag=True, help="Restart on code changes (development).")
def serve(host: str, port: int, reload: bool):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "learnforge.api.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=os.environ.get("LEARNFORGE_LOG_LEVEL", "info").lower(),
    )


# Register subcommand groups
from learnforge.cli.db_cmd import db  # noqa: E402
from learnforge.cli.users_cmd import users  # noqa: E402

cli.add_command(db)
cli.add_command(users)
