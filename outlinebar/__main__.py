"""Module entrypoint for ``python -m outlinebar``.

All argument parsing and setup happen in ``outlinebar.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
