# read/write bytes + json
from pathlib import Path
import json

def ensure_dir(p):
    Path(p).mkdir(parents=True, exist_ok=True)

def write_json(obj, path):
    p = Path(path); ensure_dir(p.parent); p.write_text(json.dumps(obj, indent=2), encoding="utf-8")

def read_bytes(path) -> bytes:
    return Path(path).read_bytes()

def write_bytes(data: bytes, path):
    p = Path(path); ensure_dir(p.parent); p.write_bytes(data)
