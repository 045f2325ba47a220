"""
Program Importer.

Run this script to load programs exported by the editor (a JSON file with
one program, a list of programs, or {"programs": [...]}) into the
database configured by DATABASE_URL.

Usage:
    python -m relay_sequencer.scripts.import_programs programs.json

Every program is validated before anything is written; a malformed file
leaves the database untouched.
"""

import json
import sys
from pathlib import Path
from typing import List, Optional

from relay_sequencer.domain.exceptions import MalformedProgram
from relay_sequencer.domain.models import load_programs
from relay_sequencer.infrastructure.database.connection import engine, init_db
from relay_sequencer.repositories.program import SqlProgramRepository


def import_programs(path: Path, db_engine=engine) -> int:
    """Returns the number of programs written."""
    data = json.loads(path.read_text(encoding="utf-8"))
    programs = load_programs(data)

    init_db(db_engine)
    repository = SqlProgramRepository(db_engine)

    print(f"Found {len(programs)} programs to import.")
    for program in programs:
        print(f"Processing program: {program.id} ({program.name})")
        repository.save_program(program)

    print("Program import complete.")
    return len(programs)


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Provide path to a JSON program file.")
        return 2

    path = Path(args[0])
    if not path.exists():
        print(f"File not found: {path}")
        return 2

    try:
        import_programs(path)
    except json.JSONDecodeError as e:
        print(f"Invalid JSON: {e}")
        return 1
    except MalformedProgram as e:
        print(f"Malformed program at {e.field}: {e.message}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
