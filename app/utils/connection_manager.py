"""
Connection manager for handling external service connections.
Creates the Supabase client on first use and keeps a single instance of it
for the lifetime of the process.
"""
import logging
from typing import Dict, Optional
import atexit

# Supabase
from supabase import create_client, Client

# Configuration
from config.config import settings

# Configure logging
logger = logging.getLogger(__name__)

class ConnectionManager:
    """
    Connection manager for handling external service connections.
    Implements the Singleton pattern to ensure only one instance exists.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConnectionManager, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the connection manager if not already initialized."""
        if self._initialized:
            return

        self._supabase_clients: Dict[str, Client] = {}

        # Register cleanup handler
        atexit.register(self.close_all_connections)

        self._initialized = True
        logger.info("Connection manager initialized")

    def get_supabase_client(self, key_type: str = "service") -> Optional[Client]:
        """
        Get a Supabase client from the pool or create a new one.

        The backend always talks to Supabase with the service role key, so
        row-level security does not apply; every query scopes rows by user id
        itself.

        Args:
            key_type: Pool key for the client

        Returns:
            Supabase client, or None when credentials are not configured
        """
        if key_type in self._supabase_clients:
            return self._supabase_clients[key_type]

        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            logger.error("Supabase URL or service role key is not set in environment variables")
            return None

        logger.info(f"Creating Supabase client for {settings.SUPABASE_URL}")
        client = create_client(
            supabase_url=settings.SUPABASE_URL,
            supabase_key=settings.SUPABASE_SERVICE_ROLE_KEY
        )

        self._supabase_clients[key_type] = client
        return client

    def close_supabase_connections(self):
        """Close all Supabase connections."""
        for key, client in self._supabase_clients.items():
            # Supabase has no explicit close; release the underlying httpx session
            postgrest = getattr(client, "postgrest", None)
            session = getattr(postgrest, "session", None)
            if session is not None and hasattr(session, "close"):
                try:
                    session.close()
                except Exception as e:
                    logger.error(f"Error closing Supabase client {key}: {str(e)}")
            logger.info(f"Cleared Supabase client: {key}")

        self._supabase_clients.clear()

    def close_all_connections(self):
        """Close all connections."""
        logger.info("Closing all connections")
        self.close_supabase_connections()

# Create a singleton instance
connection_manager = ConnectionManager()
