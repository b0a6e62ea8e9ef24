"""Entry point for the Trifonius CLI when run as python -m trifonius."""

from trifonius.cli.main import main

main()
