import os
import sys

# Ensure the project root is on the Python path when tests are executed from the
# tests directory without installing the package.
PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)
