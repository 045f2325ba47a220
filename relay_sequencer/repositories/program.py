from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from sqlmodel import Session, select

from ..data.example_programs import EXAMPLE_PROGRAMS
from ..domain.models import Program
from ..infrastructure.database.connection import engine
from ..infrastructure.database.tables import ProgramDBModel
from ..services.exceptions import ProgramNotFoundError
from ..state.models import utc_now


# The Interface
class ProgramRepository(ABC):
    """
    Defines how the application accesses Program definitions.
    This allows us change how data is accessed (Memory -> SQL -> API) later
    without changing the ProgramService code.
    """

    @abstractmethod
    def get_program(self, program_id: str) -> Program:
        """
        Retrieves a program by ID.
        Raises ProgramNotFoundError if not found.
        """
        pass

    @abstractmethod
    def list_programs(self) -> List[Program]:
        pass

    @abstractmethod
    def save_program(self, program: Program) -> None:
        """Inserts or replaces the program with the same ID."""
        pass

    @abstractmethod
    def delete_program(self, program_id: str) -> bool:
        """Deletes a program. Returns True if found and deleted."""
        pass


class InMemoryProgramRepository(ProgramRepository):
    """
    Uses in-memory dictionary for program storage for testing/dev purposes.
    """

    def __init__(self, programs: Optional[Iterable[Program]] = None):
        # Insertion order is the listing order
        self._index: Dict[str, Program] = {p.id: p for p in programs or ()}

    def get_program(self, program_id: str) -> Program:
        if program_id not in self._index:
            raise ProgramNotFoundError(program_id)
        return self._index[program_id]

    def list_programs(self) -> List[Program]:
        return list(self._index.values())

    def save_program(self, program: Program) -> None:
        self._index[program.id] = program

    def delete_program(self, program_id: str) -> bool:
        return self._index.pop(program_id, None) is not None


class StaticProgramRepository(InMemoryProgramRepository):
    """
    Starts with the bundled example programs.
    """

    def __init__(self):
        super().__init__(EXAMPLE_PROGRAMS.values())


class SqlProgramRepository(ProgramRepository):
    """
    Reads from the 'programs' table (JSON column).
    """

    def __init__(self, db_engine=engine):
        self.engine = db_engine

    def get_program(self, program_id: str) -> Program:
        with Session(self.engine) as db:
            result = db.get(ProgramDBModel, program_id)
            if not result:
                raise ProgramNotFoundError(program_id)

            # Deserialize JSON -> Pydantic
            return Program.model_validate(result.program_data)

    def list_programs(self) -> List[Program]:
        with Session(self.engine) as db:
            rows = db.exec(select(ProgramDBModel).order_by(ProgramDBModel.created_at)).all()
            return [Program.model_validate(row.program_data) for row in rows]

    def save_program(self, program: Program) -> None:
        with Session(self.engine) as db:
            existing = db.get(ProgramDBModel, program.id)
            if existing:
                existing.name = program.name
                existing.enabled = program.enabled
                existing.program_data = program.to_json_dict()
                existing.updated_at = utc_now()
                db.add(existing)
            else:
                db.add(
                    ProgramDBModel(
                        program_id=program.id,
                        name=program.name,
                        enabled=program.enabled,
                        program_data=program.to_json_dict(),
                    )
                )
            db.commit()

    def delete_program(self, program_id: str) -> bool:
        with Session(self.engine) as db:
            result = db.get(ProgramDBModel, program_id)
            if result:
                db.delete(result)
                db.commit()
                return True
            return False
