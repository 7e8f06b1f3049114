import typer

from .commands import provider, run, serve

app = typer.Typer(help="Generative-AI chat gateway CLI")

# Include sub-commands
app.add_typer(serve.app, name="serve", help="Start the HTTP gateway")
app.add_typer(run.app, name="run", help="Route a single request from the terminal")
app.add_typer(provider.app, name="provider", help="Inspect provider families")


def main():
    app()


if __name__ == "__main__":
    main()
