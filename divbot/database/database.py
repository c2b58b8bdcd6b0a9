from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from divbot.config import Config
from divbot.database.models import Base
from divbot.utils.logger import setup_logger

class Database:
    def __init__(self, database_url: Optional[str] = None):
        self.logger = setup_logger(__name__)
        self.database_url = database_url or Config.DATABASE_URL
        self.engine = None
        self.session_factory = None

    async def initialize(self):
        """Initialize the database connection and create tables"""
        self.logger.info("Initializing database...")

        # Convert sqlite URL to async if needed
        database_url = self.database_url
        if database_url.startswith('sqlite:///'):
            database_url = database_url.replace('sqlite:///', 'sqlite+aiosqlite:///')

        self.engine = create_async_engine(
            database_url,
            echo=Config.DEBUG,
            future=True
        )

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        # Create all tables
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        self.logger.info("Database initialized successfully")

    async def close(self):
        """Close the database connection"""
        if self.engine:
            await self.engine.dispose()
            self.logger.info("Database connection closed")
