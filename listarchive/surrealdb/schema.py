"""Schema setup for the archive collections.

Tables are schemaless because lists, topics and messages carry arbitrary
extra fields. Indexes cover the two hot queries: messages by subject ordered
by date, and topics by source ordered by last activity.
"""

import logging

from .protocols import DatabaseExecutor

logger = logging.getLogger(__name__)

COLLECTIONS = ("lists", "topics", "messages", "processed")

SCHEMA_QUERIES = [
    """
    DEFINE TABLE lists SCHEMALESS;
    """,
    """
    DEFINE TABLE topics SCHEMALESS;
    DEFINE INDEX idx_topics_source ON TABLE topics COLUMNS source;
    DEFINE INDEX idx_topics_end ON TABLE topics COLUMNS `end`;
    """,
    """
    DEFINE TABLE messages SCHEMALESS;
    DEFINE INDEX idx_messages_subject ON TABLE messages COLUMNS subjectToken;
    DEFINE INDEX idx_messages_date ON TABLE messages COLUMNS date;
    """,
    """
    DEFINE TABLE processed SCHEMALESS;
    """,
]


async def init_schema(executor: DatabaseExecutor) -> None:
    """Define archive tables and indexes.

    Existing definitions are left in place.
    """
    for query in SCHEMA_QUERIES:
        try:
            await executor.execute(query.strip())
        except Exception as e:
            # Table/index may already exist
            logger.debug(f"Schema initialization note: {e}")
    logger.info(f"Initialized archive schema: {', '.join(COLLECTIONS)}")
