import sys
from pathlib import Path

# Allow running the suite from a checkout without installing the package.
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))
