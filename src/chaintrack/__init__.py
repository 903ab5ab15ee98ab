"""chaintrack: normalize blockchain explorer data into Awaken tax CSV."""

__version__ = "0.1.0"


def __getattr__(name):
    # cli.main imports the whole domain layer; load it only on demand
    if name == "main":
        from chaintrack.cli.main import main

        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
