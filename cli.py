from rich import print
from typing import Annotated

from sqlalchemy.orm import Session
import typer

from app.db.session import SessionLocal
from app.db.init_db import init_db, seed_products as seed_sample_products
from app.crud.products import delete_products


cli = typer.Typer()


@cli.command()
def seed_products():
    """
    Insert the sample product catalog if it is empty
    """
    init_db()
    db: Session = SessionLocal()
    try:
        inserted = seed_sample_products(db)
    finally:
        db.close()
    if not inserted:
        print("[bold yellow]Alert:[/bold yellow] products already exist, nothing seeded")
        return
    print(f"[green]Seeded {inserted} products[/green]")


@cli.command()
def reset_products(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
):
    """
    Delete all products; they are re-seeded on the next server start
    """
    if not yes:
        typer.confirm("Delete every product in the catalog?", abort=True)
    init_db()
    db: Session = SessionLocal()
    try:
        deleted = delete_products(db)
    finally:
        db.close()
    print(f"[green]Deleted {deleted} products[/green]")


@cli.command()
def serve(
    host: Annotated[str, typer.Option()] = "0.0.0.0",
    port: Annotated[int, typer.Option()] = 5000,
    reload: Annotated[bool, typer.Option()] = False,
):
    """
    Run the API and websocket server
    """
    import uvicorn

    print(f"Serving on [bold]http://{host}:{port}[/bold] (websocket at /ws)")
    uvicorn.run("app.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
