"""Allow ``python -m rootfs_extractor``."""

from .cli import main

if __name__ == "__main__":
    main()
