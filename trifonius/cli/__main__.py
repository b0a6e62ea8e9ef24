"""Entry point for the Trifonius CLI when run as python -m trifonius.cli."""

if __name__ == "__main__":
    from trifonius.cli.main import main

    main()
