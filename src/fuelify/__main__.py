"""Module entry point: ``python -m fuelify``."""

from fuelify.app import main

main()
