# main.py
import sys
from pathlib import Path

# Allow running from a checkout without installing the package
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from edgefinder.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
