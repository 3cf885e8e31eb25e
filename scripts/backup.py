"""Export the remote state document to a timestamped JSON file under backups/."""

from __future__ import annotations

import importlib
import json
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.bizledger.bizledger.container import build_container


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)
    path = container.sync_engine.doc_path

    snapshot = container.documents.get(path)
    if not snapshot.exists:
        raise SystemExit(f"Nothing to back up: {path} does not exist")

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"bizledger_state_{ts}.json"
    out_file.write_text(json.dumps(snapshot.data, ensure_ascii=False, indent=2, default=str), encoding="utf-8")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
