# glass_nesting/__main__.py
# Package entrypoint so you can run:
#   python -m glass_nesting --help
# and it will delegate to the JSON job runner.
#
# Examples:
#   python -m glass_nesting --job job.json
#   python -m glass_nesting --job job.json --algorithm greedy --out out/ --no_plot

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
