"""Allow running azvm with ``python -m azvm``."""

from azvm.cli import main

if __name__ == "__main__":
    main()
