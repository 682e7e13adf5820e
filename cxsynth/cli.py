# cxsynth/cli.py
from cxsynth.__main__ import app as _typer_app


def main():
    """Console script entrypoint for the cxsynth CLI."""
    _typer_app()
