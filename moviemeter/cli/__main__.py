"""Module entry point for `python -m moviemeter.cli`."""

if __name__ == "__main__":  # pragma: no cover (invocation driven)
    from moviemeter.cli import cli

    cli()
