"""
Virtual Sequence Generator Base Class
Provides keyed, transactional counters backing human-readable display numbers
"""

from gym_backoffice import db
from sqlalchemy import text
import threading
from abc import ABC, abstractmethod


class VirtualSequenceGenerator(ABC):
    """
    Abstract base class for sequence generators.

    Each generator owns one counter table holding a row per sequence key.
    Counters are advanced with an in-database increment inside the caller's
    transaction, so a rolled back insert also rolls back its number.
    """

    _lock = threading.Lock()

    @classmethod
    @abstractmethod
    def get_sequence_table_name(cls):
        """
        Return the table name for the sequence counter.
        Must be implemented by subclasses
        """
        pass

    @classmethod
    def get_seed_value(cls, key):
        """
        Value a counter starts from the first time a key is used.
        Subclasses override this to continue numbering found in existing rows.
        """
        return 0

    @classmethod
    def create_sequence_if_not_exists(cls):
        """
        Create the counter table if it doesn't exist
        """
        try:
            db.session.execute(text(f"""
                CREATE TABLE IF NOT EXISTS {cls.get_sequence_table_name()} (
                    sequence_key VARCHAR(50) PRIMARY KEY,
                    current_value INTEGER NOT NULL DEFAULT 0
                )
            """))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    @classmethod
    def get_next_id(cls, key="default"):
        """
        Advance the counter for ``key`` and return the new value.

        Does not commit; the value becomes durable with the caller's transaction.
        """
        table = cls.get_sequence_table_name()
        with cls._lock:
            result = db.session.execute(
                text(f"UPDATE {table} SET current_value = current_value + 1 WHERE sequence_key = :key"),
                {"key": key}
            )
            if result.rowcount == 0:
                db.session.execute(
                    text(f"INSERT INTO {table} (sequence_key, current_value) VALUES (:key, :value)"),
                    {"key": key, "value": cls.get_seed_value(key) + 1}
                )
            return db.session.execute(
                text(f"SELECT current_value FROM {table} WHERE sequence_key = :key"),
                {"key": key}
            ).scalar()

    @classmethod
    def get_current_sequence_value(cls, key="default"):
        """
        Get the current value of the sequence, or None if the key was never used
        """
        result = db.session.execute(
            text(f"SELECT current_value FROM {cls.get_sequence_table_name()} WHERE sequence_key = :key"),
            {"key": key}
        )
        return result.scalar()

    @staticmethod
    def highest_suffix(numbers, prefix):
        """
        Highest numeric suffix among display numbers shaped ``<prefix>-<digits>``
        """
        highest = 0
        for number in numbers:
            if not number or not number.startswith(f"{prefix}-"):
                continue
            suffix = number[len(prefix) + 1:]
            if suffix.isdigit():
                highest = max(highest, int(suffix))
        return highest
