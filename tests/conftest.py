import sys, os

# Ensure src and the shared test helpers are on path for test imports
TESTS = os.path.dirname(os.path.abspath(__file__))
ROOT = os.path.dirname(TESTS)
SRC = os.path.join(ROOT, 'src')
for path in (SRC, TESTS):
    if path not in sys.path:
        sys.path.insert(0, path)
