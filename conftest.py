"""
Root conftest.py for pytest configuration.
Automatically adds all package src directories to Python path.
"""
import sys
from pathlib import Path

# Get the project root directory
PROJECT_ROOT = Path(__file__).parent

# Add each package's src directory to Python path
packages_dir = PROJECT_ROOT / "packages"
if packages_dir.exists():
    for package_dir in sorted(packages_dir.iterdir()):
        src_dir = package_dir / "src"
        if package_dir.is_dir() and src_dir.exists():
            src_path = str(src_dir.absolute())
            if src_path not in sys.path:
                sys.path.insert(0, src_path)

# Also add the project root for any top-level imports
root_path = str(PROJECT_ROOT.absolute())
if root_path not in sys.path:
    sys.path.insert(0, root_path)
