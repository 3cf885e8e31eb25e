"""Create the remote state document from the initial state if it is missing."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.bizledger.bizledger.container import build_container
from src.bizledger.bizledger.state.model import initial_state
from src.bizledger.bizledger.sync.serialization import to_storage


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)
    path = container.sync_engine.doc_path

    if container.documents.get(path).exists:
        print(f"OK: {path} already exists")
        return
    container.documents.set(path, to_storage(initial_state()))
    print(f"OK: Created {path} ({settings.DOCUMENT_BACKEND})")


if __name__ == "__main__":
    main()
