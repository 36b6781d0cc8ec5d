import os, json, time, logging
from datetime import datetime, timezone
from pathlib import Path
from .data_store import STORE

DATA_DIR = Path(__file__).resolve().parent / "data"
SNAPSHOT_FILE = Path(os.getenv("SNAPSHOT_FILE") or DATA_DIR / "snapshot.json")

REFRESH_SEC = int(os.getenv("REFRESH_SEC", "600"))

def refresh_once(store=None, out_file=None):
    store = store or STORE
    out_file = Path(out_file or SNAPSHOT_FILE)
    if not store.load():
        raise RuntimeError(store.last_error or "Rankings load failed")
    payload = {
        "as_of": datetime.now(timezone.utc).isoformat(),
        "reference_date": store.snapshot.reference_date,
        "rankings": store.ranking_rows(),
        "chart": store.chart(),
    }
    out_file.parent.mkdir(parents=True, exist_ok=True)
    tmp = out_file.with_suffix(".tmp")
    tmp.write_text(json.dumps(payload), encoding="utf-8")
    tmp.replace(out_file)
    return payload

def main():
    logging.basicConfig(level=logging.INFO)
    while True:
        try:
            refresh_once()
            logging.info("Snapshot refreshed.")
        except Exception as e:
            logging.exception("Refresh failed: %s", e)
        if REFRESH_SEC <= 0:
            break
        time.sleep(REFRESH_SEC)

if __name__ == "__main__":
    main()
