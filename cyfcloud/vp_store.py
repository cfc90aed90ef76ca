"""Visual progress projects stored in the vp database."""

from dataclasses import dataclass

_COLUMNS = "id, title, owner_id, data"


@dataclass
class VPModel:
    """A visual progress project; its data is an opaque JSON document."""

    id: int = 0
    title: str = ""
    owner_id: int = 0
    data: str = ""


@dataclass
class VPInfoModel:
    """A project's id, title and owner, without its data."""

    id: int = 0
    title: str = ""
    owner_id: int = 0


def _model_from_row(row):
    vid, title, owner_id, data = row
    return VPModel(id=vid, title=title or "", owner_id=owner_id or 0,
                   data=data or "")


class VPStore:
    """Queries and updates on the ``v_p_model`` table."""

    def __init__(self, conn):
        self._conn = conn

    def create_tables(self):
        """Create the project table if it is missing."""
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS v_p_model ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, title TEXT UNIQUE, "
                "owner_id INTEGER, data TEXT)"
            )

    def project_list(self, owner_id):
        """Summaries of every project an owner has."""
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM v_p_model WHERE owner_id = ?",
            (int(owner_id),),
        )
        return [
            VPInfoModel(id=m.id, title=m.title, owner_id=m.owner_id)
            for m in map(_model_from_row, rows)
        ]

    def find_project(self, vp_id):
        """A project by id, or ``None``."""
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM v_p_model WHERE id = ?", (int(vp_id),)
        ).fetchone()
        return None if row is None else _model_from_row(row)

    def update(self, model):
        """Store the non-empty fields of a project."""
        changes = {
            k: v
            for k, v in {
                "title": model.title,
                "owner_id": model.owner_id,
                "data": model.data,
            }.items()
            if v
        }
        if not changes:
            return
        assignments = ", ".join(f"{column} = ?" for column in changes)
        with self._conn:
            self._conn.execute(
                f"UPDATE v_p_model SET {assignments} WHERE id = ?",
                (*changes.values(), model.id),
            )

    def insert(self, model):
        """Add a project and return its id; titles are unique."""
        with self._conn:
            self._conn.execute(
                "INSERT INTO v_p_model (title, owner_id, data) VALUES (?, ?, ?)",
                (model.title, model.owner_id, model.data),
            )
        row = self._conn.execute(
            "SELECT id FROM v_p_model WHERE title = ?", (model.title,)
        ).fetchone()
        return row[0]