# --- ttstore_lib/services/storage_service.py ---
import sqlite3
import logging

from ttparse_lib.constants import KNOWN_ROOMS
from ttparse_lib.models import classify_room
from ttstore_lib.availability import free_rooms, overlapping_slots

log = logging.getLogger("ttstore.storage")


class StorageService:
    """
    Manages all interactions with the timetable SQLite database.
    """

    def __init__(self, db_path: str):
        """
        Initializes the service with the path to the SQLite database.
        Args:
            db_path (str): The full file path to the database.
        """
        if not db_path:
            raise ValueError("Database path cannot be empty.")
        self.db_path = db_path

    def _get_connection(self) -> sqlite3.Connection:
        """
        Establishes a connection to the SQLite database.
        Enables foreign key support and sets the row factory.
        """
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self, seed_rooms: bool = True):
        """
        Creates all necessary database tables if they do not already exist.
        This method is idempotent and safe to run on every application start.
        """
        log.info("Initializing database schema...")
        conn = self._get_connection()
        try:
            with conn:
                self._create_rooms_table(conn)
                self._create_timetables_table(conn)
                self._create_schedules_table(conn)
                if seed_rooms:
                    conn.executemany(
                        "INSERT OR IGNORE INTO rooms (room_number, room_type) VALUES (?, ?);",
                        [(room, "classroom") for room in KNOWN_ROOMS],
                    )
            log.info("Database schema checked and is up to date.")
        except sqlite3.Error as e:
            log.error("An error occurred during DB initialization: %s", e)
            raise
        finally:
            conn.close()

    # --- Schema Creation ---
    def _create_rooms_table(self, conn: sqlite3.Connection):
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS rooms (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                room_number TEXT UNIQUE NOT NULL,
                room_type TEXT DEFAULT 'classroom'
            );
            """
        )

    def _create_timetables_table(self, conn: sqlite3.Connection):
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS timetables (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                department TEXT NOT NULL,
                year_sem TEXT NOT NULL,
                section TEXT,
                default_room TEXT,
                filename TEXT NOT NULL,
                uploaded_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            """
        )

    def _create_schedules_table(self, conn: sqlite3.Connection):
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schedules (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timetable_id INTEGER NOT NULL,
                day TEXT NOT NULL,
                time_slot TEXT NOT NULL,
                room_number TEXT NOT NULL,
                subject TEXT,
                FOREIGN KEY (timetable_id) REFERENCES timetables (id) ON DELETE CASCADE
            );
            """
        )

    # --- Upload Methods ---
    def save_sections(self, filename: str, sections) -> dict:
        """
        Records every room, timetable and schedule entry of one upload in a
        single transaction. Either all of it is committed or none of it is.
        """
        log.debug("Saving %d section(s) from '%s'.", len(sections), filename)
        totals = {"sections": 0, "entries": 0, "new_rooms": 0}
        conn = self._get_connection()
        try:
            with conn:
                for sec in sections:
                    for room in sec.room_set:
                        cursor = conn.execute(
                            "INSERT OR IGNORE INTO rooms (room_number, room_type) VALUES (?, ?);",
                            (room, classify_room(room)),
                        )
                        totals["new_rooms"] += cursor.rowcount
                    cursor = conn.execute(
                        """
                        INSERT INTO timetables
                            (department, year_sem, section, default_room, filename)
                        VALUES (?, ?, ?, ?, ?);
                        """,
                        (sec.department, sec.year_sem, sec.section, sec.default_room, filename),
                    )
                    timetable_id = cursor.lastrowid
                    conn.executemany(
                        """
                        INSERT INTO schedules
                            (timetable_id, day, time_slot, room_number, subject)
                        VALUES (?, ?, ?, ?, ?);
                        """,
                        [
                            (timetable_id, e.day, e.time_slot, e.room_number, e.subject)
                            for e in sec.entries
                        ],
                    )
                    totals["sections"] += 1
                    totals["entries"] += len(sec.entries)
        except sqlite3.Error as e:
            log.error("Could not save '%s'; nothing was committed: %s", filename, e)
            raise
        finally:
            conn.close()
        log.info(
            "Saved %d section(s), %d entries, %d new rooms from '%s'.",
            totals["sections"],
            totals["entries"],
            totals["new_rooms"],
            filename,
        )
        return totals

    def list_uploads(self):
        log.debug("Fetching uploads.")
        with self._get_connection() as conn:
            return conn.execute(
                """
                SELECT filename, MIN(uploaded_at) AS uploaded_at, COUNT(*) AS sections
                FROM timetables GROUP BY filename ORDER BY uploaded_at DESC;
                """
            ).fetchall()

    def delete_upload(self, filename: str) -> int:
        """Removes every timetable (and its schedule) recorded from a file."""
        log.debug("Deleting upload '%s'.", filename)
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM timetables WHERE filename = ?;", (filename,))
            return cursor.rowcount

    # --- Read Methods ---
    def get_rooms(self):
        with self._get_connection() as conn:
            return conn.execute("SELECT * FROM rooms ORDER BY room_number;").fetchall()

    def get_timetables(self):
        with self._get_connection() as conn:
            return conn.execute(
                """
                SELECT id, department, year_sem, section, default_room, filename, uploaded_at
                FROM timetables;
                """
            ).fetchall()

    def get_schedule(self, timetable_id: int):
        log.debug("Fetching schedule for timetable id: %d.", timetable_id)
        with self._get_connection() as conn:
            return conn.execute(
                "SELECT * FROM schedules WHERE timetable_id = ?;", (timetable_id,)
            ).fetchall()

    def delete_timetable(self, timetable_id: int):
        log.debug("Deleting timetable with id: %d.", timetable_id)
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM timetables WHERE id = ?;", (timetable_id,))
            return cursor.rowcount > 0

    def get_slots(self) -> dict:
        """Distinct days and time slots that have at least one entry."""
        with self._get_connection() as conn:
            days = conn.execute("SELECT DISTINCT day FROM schedules ORDER BY day;").fetchall()
            slots = conn.execute(
                "SELECT DISTINCT time_slot FROM schedules ORDER BY time_slot;"
            ).fetchall()
        return {"days": [r["day"] for r in days], "time_slots": [r["time_slot"] for r in slots]}

    # --- Availability ---
    def find_free_rooms(self, day: str, time_from: str, time_to: str) -> dict:
        """
        Rooms with no schedule entry on `day` in any slot overlapping
        [time_from, time_to).
        """
        slots = overlapping_slots(time_from, time_to)
        log.debug("Free-room query %s %s-%s overlaps %s", day, time_from, time_to, slots)
        with self._get_connection() as conn:
            rooms = conn.execute("SELECT * FROM rooms ORDER BY room_number;").fetchall()
            rows = conn.execute(
                "SELECT day, time_slot, room_number FROM schedules WHERE LOWER(day) = LOWER(?);",
                (day,),
            ).fetchall()
        _, occupied = free_rooms(
            [r["room_number"] for r in rooms], rows, day, time_from, time_to
        )
        return {
            "day": day,
            "from": time_from,
            "to": time_to,
            "overlapping_slots": slots,
            "free_rooms": [dict(r) for r in rooms if r["room_number"] not in occupied],
            "occupied_rooms": occupied,
        }
