"""Support chat tables

Revision ID: 001
Revises:
Create Date: 2026-10-18

Creates: chat_conversations, chat_messages
Types: chat_conversation_status, chat_participant, chat_sender_role
"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # ── 1. Enum types ─────────────────────────────────────────────────────
    op.execute("CREATE TYPE chat_conversation_status AS ENUM ('OPEN', 'ENDED');")
    op.execute("CREATE TYPE chat_participant AS ENUM ('customer', 'agent');")
    op.execute(
        "CREATE TYPE chat_sender_role AS ENUM ('customer', 'agent', 'bot', 'system');"
    )

    # ── 2. chat_conversations ─────────────────────────────────────────────
    op.execute("""
        CREATE TABLE chat_conversations (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            customer_id VARCHAR(64) NOT NULL,
            agent_id VARCHAR(64),
            status chat_conversation_status NOT NULL DEFAULT 'OPEN',
            order_context_id VARCHAR(64),
            last_message_preview TEXT NOT NULL DEFAULT '',
            last_message_at TIMESTAMPTZ,
            unread_by_customer BOOLEAN NOT NULL DEFAULT false,
            ended_by chat_participant,
            ended_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)

    # ── 3. chat_messages ──────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE chat_messages (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            conversation_id UUID NOT NULL
                REFERENCES chat_conversations(id) ON DELETE CASCADE,
            sender_role chat_sender_role NOT NULL,
            sender_id VARCHAR(64),
            text TEXT NOT NULL,
            read_by_customer BOOLEAN NOT NULL DEFAULT false,
            read_by_agent BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)

    # ── 4. Indexes ────────────────────────────────────────────────────────
    op.execute(
        "CREATE INDEX ix_chat_conversations_customer "
        "ON chat_conversations (customer_id, status, updated_at);"
    )
    op.execute(
        "CREATE INDEX ix_chat_conversations_agent "
        "ON chat_conversations (agent_id, status, updated_at);"
    )
    op.execute(
        "CREATE INDEX ix_chat_conversations_order_context_id "
        "ON chat_conversations (order_context_id);"
    )
    op.execute(
        "CREATE INDEX ix_chat_messages_conversation_created "
        "ON chat_messages (conversation_id, created_at);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS chat_messages;")
    op.execute("DROP TABLE IF EXISTS chat_conversations;")
    op.execute("DROP TYPE IF EXISTS chat_sender_role;")
    op.execute("DROP TYPE IF EXISTS chat_participant;")
    op.execute("DROP TYPE IF EXISTS chat_conversation_status;")
