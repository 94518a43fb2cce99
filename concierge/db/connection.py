"""Database connection and schema management."""

import duckdb
from typing import Optional
from pathlib import Path
from ..utils.logger import get_app_logger


class DatabaseConnection:
    """DuckDB connection manager."""

    def __init__(self, db_path: str = "./data/concierge.db"):
        """
        Initialize database connection.

        Args:
            db_path: Path to DuckDB database file
        """
        self.db_path = db_path
        self.logger = get_app_logger()
        self.conn: Optional[duckdb.DuckDBPyConnection] = None

        db_dir = Path(db_path).parent
        db_dir.mkdir(parents=True, exist_ok=True)

        self._connect()
        self._init_schema()

    def _connect(self):
        """Connect to DuckDB database."""
        try:
            self.conn = duckdb.connect(self.db_path)
            self.logger.info(f"Connected to DuckDB at {self.db_path}")
        except Exception as e:
            self.logger.error(f"Failed to connect to DuckDB: {e}")
            raise

    def _init_schema(self):
        """Initialize database schema."""
        try:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS conversations (
                    id VARCHAR PRIMARY KEY,
                    session_id VARCHAR NOT NULL,
                    user_id VARCHAR,
                    start_time TIMESTAMP NOT NULL,
                    end_time TIMESTAMP,
                    is_active BOOLEAN DEFAULT TRUE,
                    ip_address VARCHAR,
                    user_agent VARCHAR
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS messages (
                    id BIGINT PRIMARY KEY,
                    conversation_id VARCHAR NOT NULL,
                    is_from_user BOOLEAN NOT NULL,
                    message_text VARCHAR NOT NULL,
                    agent_type VARCHAR,
                    timestamp TIMESTAMP NOT NULL,
                    sequence_number INTEGER NOT NULL,
                    metadata JSON,
                    contains_sensitive_data BOOLEAN DEFAULT FALSE
                )
            """)

            # Interaction log is append-only
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS agent_interactions (
                    id BIGINT PRIMARY KEY,
                    conversation_id VARCHAR NOT NULL,
                    agent_type VARCHAR NOT NULL,
                    action VARCHAR NOT NULL,
                    success BOOLEAN NOT NULL,
                    duration_ms INTEGER NOT NULL,
                    timestamp TIMESTAMP NOT NULL,
                    error_message VARCHAR,
                    action_context VARCHAR,
                    intent_confidence DOUBLE NOT NULL
                )
            """)

            self.conn.execute(
                "CREATE UNIQUE INDEX IF NOT EXISTS idx_messages_sequence "
                "ON messages(conversation_id, sequence_number)"
            )
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_conversations_session ON conversations(session_id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_messages_conversation ON messages(conversation_id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_interactions_conversation ON agent_interactions(conversation_id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_interactions_timestamp ON agent_interactions(timestamp)")

            self.conn.execute("CREATE SEQUENCE IF NOT EXISTS messages_id_seq START 1")
            self.conn.execute("CREATE SEQUENCE IF NOT EXISTS interactions_id_seq START 1")

            self.logger.info("Database schema initialized successfully")

        except Exception as e:
            self.logger.error(f"Failed to initialize database schema: {e}")
            raise

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.logger.info("Database connection closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
