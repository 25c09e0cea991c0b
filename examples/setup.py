# examples/setup.py
"""
Simple script that validates if all the dependencies are installed and imports the main module.
"""


def handle_deps():
    from fastapi import FastAPI
    from pydantic import BaseModel
    from sqlalchemy import create_engine
    from rich.console import Console


def handle_docrest():
    from docrest import __version__, create_app

    create_app(root="./data")
    print(f"docrest importable (version {__version__})")


if __name__ == "__main__":
    handle_deps()
    handle_docrest()
