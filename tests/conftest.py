import os
import tempfile
from pathlib import Path

# Must run before taskflow.config is imported anywhere.
_tmp = Path(tempfile.mkdtemp(prefix="taskflow-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp / 'tasks.sqlite'}"
