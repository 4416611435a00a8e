"""`python -m cli` (with `src/` on the path) runs the same app as `neighbours`."""

from cli.main import run

run()
