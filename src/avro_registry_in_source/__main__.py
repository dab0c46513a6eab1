"""Module entry point for `python -m avro_registry_in_source`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
