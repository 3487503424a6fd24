"""Tests for the application entry point and packaging metadata."""

import importlib
import tomllib
from pathlib import Path

import uvicorn

from backend import app as app_module

PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


def test_main_serves_the_app(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    app_module.main()

    assert calls == [(app_module.app, {"host": "0.0.0.0", "port": 8080})]


def test_console_script_points_at_main():
    project = tomllib.loads(PYPROJECT.read_text())["project"]

    module_name, _, attr = project["scripts"]["climasim"].partition(":")

    assert getattr(importlib.import_module(module_name), attr) is app_module.main


def test_design_notes_are_not_the_package_description():
    project = tomllib.loads(PYPROJECT.read_text())["project"]

    assert project.get("readme") != "DESIGN.md"
