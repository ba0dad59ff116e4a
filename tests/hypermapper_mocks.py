"""
A fake HyperMapper installation for integration tests.

``install_fake_hypermapper(home, batches)`` writes ``scripts/hypermapper.py``
and ``scripts/compute_pareto.py`` under ``home``. The fake optimizer replays
``batches`` (a list of ``{"header": "x0,x1", "rows": ["1,2", ...]}``), reads
each response block, records everything in ``<output_folder>/fake_session.json``
and finishes with the end-of-run sentinel.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

FAKE_OPTIMIZER = r'''
import json
import sys
from pathlib import Path

scenario_path = Path(sys.argv[1])
scenario = json.loads(scenario_path.read_text())
batches = json.loads((Path(__file__).parent / "batches.json").read_text())

session = {"scenario": str(scenario_path), "responses": []}
session_file = Path(scenario["run_directory"]) / Path(scenario["output_data_file"]).parent / "fake_session.json"

for batch in batches:
    rows = batch["rows"]
    print(f"Request {len(rows)}", flush=True)
    print(batch["header"], flush=True)
    for row in rows:
        print(row, flush=True)
    block = []
    for _ in range(len(rows) + 1):
        line = sys.stdin.readline()
        if not line:
            session["eof"] = True
            session_file.write_text(json.dumps(session))
            sys.exit(3)
        block.append(line.rstrip("\n"))
    session["responses"].append(block)

session_file.write_text(json.dumps(session))
print("End of HyperMapper", flush=True)
'''

FAKE_PARETO = r'''
import sys

print(f"Computing Pareto front for {sys.argv[1]}")
print("Pareto front written")
'''


def install_fake_hypermapper(home: Path, batches: List[Dict[str, Any]]) -> Path:
    scripts = home / "scripts"
    scripts.mkdir(parents=True, exist_ok=True)
    (scripts / "hypermapper.py").write_text(FAKE_OPTIMIZER)
    (scripts / "compute_pareto.py").write_text(FAKE_PARETO)
    (scripts / "batches.json").write_text(json.dumps(batches))
    return home


def read_session(run_dir: Path, output_folder: str = "outdata") -> Dict[str, Any]:
    return json.loads((run_dir / output_folder / "fake_session.json").read_text())
