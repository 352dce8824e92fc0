"""Authgate command-line utilities using Typer."""

import logging

import typer

from authgate.config import get_settings
from authgate.database import SessionLocal
from authgate.services.auth import AuthService
from authgate.services.credentials import CredentialCodec
from authgate.services.gateway import SqlAlchemyGateway
from authgate.services.tokens import TokenIssuer
from authgate.services.validation import InputValidator

app = typer.Typer(
    name="authgate",
    help="Authgate maintenance commands",
    no_args_is_help=True,
)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level")) -> None:
    settings = get_settings()
    level = logging.DEBUG if verbose else settings.LOG_LEVEL
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command("purge-sessions")
def purge_sessions() -> None:
    """Delete every session whose expiry has passed."""
    db = SessionLocal()
    try:
        service = AuthService(
            gateway=SqlAlchemyGateway(db),
            codec=CredentialCodec(),
            issuer=TokenIssuer(),
            validator=InputValidator(),
        )
        purged = service.purge_expired_sessions()
    finally:
        db.close()
    typer.echo(f"Purged {purged} expired session(s)")


if __name__ == "__main__":
    app()
