from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from cleantrack.container import build_container
from cleantrack.database.bootstrap import apply_schema
from cleantrack.database.seed import DEMO_PASSWORD, SAMPLE_LOCATIONS, SAMPLE_WORKERS, seed_demo


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings=settings)
    if container.conn is not None:
        apply_schema(container.conn)

    department = seed_demo(container)
    print(
        f"OK: Seeded '{department.display_name}' ({department.department_id}) with "
        f"{len(SAMPLE_LOCATIONS)} locations and {len(SAMPLE_WORKERS)} workers; password={DEMO_PASSWORD}"
    )


if __name__ == "__main__":
    main()
