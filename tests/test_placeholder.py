"""Smoke tests ensuring the package and its public names can be imported."""

from __future__ import annotations

import importlib


def test_import_package() -> None:
    module = importlib.import_module("einvoice_cii")
    assert hasattr(module, "__all__")
    for name in module.__all__:
        assert hasattr(module, name), name


def test_entry_point_module_is_importable() -> None:
    module = importlib.import_module("einvoice_cii.cli")
    assert callable(module.main)
