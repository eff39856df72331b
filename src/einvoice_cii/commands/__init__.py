"""Command implementations exposed through :mod:`einvoice_cii.cli`."""
