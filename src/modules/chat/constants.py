"""Live chat constants: canned texts and the responder keyword table."""

from __future__ import annotations

from src.models.enums import ChatParticipant, ConversationStatus

TERMINAL_STATUSES: set[ConversationStatus] = {ConversationStatus.ENDED}

# System notices
WELCOME_TEXT = (
    "Chat started. A support agent will respond soon. "
    "(Our automated helper may reply until an agent joins.)"
)
AGENT_JOINED_TEXT = "A human support agent has joined the chat."
CHAT_ENDED_TEXTS: dict[ChatParticipant, str] = {
    ChatParticipant.CUSTOMER: "Customer ended the chat.",
    ChatParticipant.AGENT: "Agent ended the chat.",
}

# ---------------------------------------------------------------------------
# Responder canned replies
# ---------------------------------------------------------------------------

HELP_MENU_TEXT = (
    "I can help you with:\n"
    "1) Order tracking\n"
    "2) Delivery time\n"
    "3) Returns / refunds\n"
    "4) Payments (eSewa / Khalti)\n"
    "5) Size guidance\n"
    "6) Talk to a human agent\n\n"
    'Reply with a number (1-6) or type keywords like "order tracking", '
    '"delivery time", "return policy", "payment failed", "size help", "talk to agent".'
)

HUMAN_AGENT_TEXT = (
    "Okay, a human agent will reply here when available.\n"
    "Tip: please also share your Order ID (if this is about an order) "
    "so the agent can help faster."
)

ORDER_TRACKING_TEXT = (
    "Order tracking steps:\n"
    "1) Open Profile > Order Tracking\n"
    "2) Enter your Tracking Number\n"
    "3) You can also open Profile > Order History to see the latest status\n\n"
    "If you share your Order ID, I can guide the next steps."
)

DELIVERY_TIME_TEXT = (
    "Delivery time:\n"
    "1) Inside valley: usually 2-5 days\n"
    "2) Outside valley: usually 4-7 days\n\n"
    "If you share your city/district, I can give a better estimate."
)

RETURNS_TEXT = (
    "Returns / refunds:\n"
    "1) Keep the item unused and in its original packaging\n"
    "2) Share your Order ID and the issue (size / defect / wrong item)\n"
    "3) We will guide pickup/return steps based on your location"
)

PAYMENTS_TEXT = (
    "Payment help (eSewa / Khalti):\n"
    "1) Share your Order ID\n"
    "2) Tell us which wallet you used (eSewa or Khalti)\n"
    "3) If you have a transaction reference, share that too"
)

SIZE_GUIDANCE_TEXT = (
    "Size guidance:\n"
    "1) Go to Profile > Update height/weight\n"
    "2) Your recommended size will show there\n\n"
    "If you tell me your height (ft) and weight (kg), I can suggest a size too."
)

# Category names, in match order
CATEGORY_GREETING = "greeting"
CATEGORY_HUMAN_AGENT = "human_agent"
CATEGORY_ORDER_TRACKING = "order_tracking"
CATEGORY_DELIVERY_TIME = "delivery_time"
CATEGORY_RETURNS = "returns"
CATEGORY_PAYMENTS = "payments"
CATEGORY_SIZE_GUIDANCE = "size_guidance"

# name -> (keywords, reply). English plus transliterated Nepali variants.
# Matching is by substring in table order, so a later keyword that contains a
# greeting ("hi", "hey") never reaches its own category.
DEFAULT_KEYWORD_TABLE: list[tuple[str, list[str], str]] = [
    (CATEGORY_GREETING, ["hello", "hi", "namaste", "hey"], HELP_MENU_TEXT),
    (
        CATEGORY_HUMAN_AGENT,
        [
            "talk to agent",
            "talk to human",
            "live agent",
            "agent",
            "customer care",
            "manche sanga kura",
            "agent sanga kura",
        ],
        HUMAN_AGENT_TEXT,
    ),
    (
        CATEGORY_ORDER_TRACKING,
        [
            "order tracking",
            "track my order",
            "track order",
            "where is my order",
            "order status",
            "mero order kaha cha",
            "mero order track",
        ],
        ORDER_TRACKING_TEXT,
    ),
    (
        CATEGORY_DELIVERY_TIME,
        [
            "delivery time",
            "estimated delivery",
            "when will it arrive",
            "delivery kati din",
        ],
        DELIVERY_TIME_TEXT,
    ),
    (
        CATEGORY_RETURNS,
        [
            "return",
            "return policy",
            "refund",
            "refund policy",
            "exchange",
            "return kasari",
            "refund kasari",
            "exchange kasari",
        ],
        RETURNS_TEXT,
    ),
    (
        CATEGORY_PAYMENTS,
        [
            "payment",
            "payment failed",
            "esewa",
            "khalti",
            "esewa problem",
            "khalti problem",
            "esewa chalena",
            "khalti chalena",
        ],
        PAYMENTS_TEXT,
    ),
    (
        CATEGORY_SIZE_GUIDANCE,
        ["size", "size help", "size guide", "kun size", "size kasari thaha paune"],
        SIZE_GUIDANCE_TEXT,
    ),
]

# Numeric shortcuts mirror the help menu
MENU_SHORTCUTS: dict[str, str] = {
    "1": "order tracking",
    "2": "delivery time",
    "3": "return policy",
    "4": "payment failed",
    "5": "size help",
    "6": "talk to agent",
}
