"""Default data for a fresh in-memory store."""

from datetime import datetime, timedelta

from deskpilot.domain.records import ChatMessage, Conversation, KnowledgeEntry, Template

DEFAULT_CONVERSATION_ID = "default-conv"
FAQ_SOURCE = "Talkdesk Digital Engagement FAQ"

DEFAULT_CONVERSATION = Conversation(
    id=DEFAULT_CONVERSATION_ID,
    customer_name="Harry He",
    customer_email="harry.he@talkdesk.com",
)

DEFAULT_TEMPLATES = [
    Template(
        id="welcome",
        title="Welcome Message",
        content=(
            "Thank you for contacting Talkdesk support. I'll be happy to help you with your "
            "questions about our digital engagement features."
        ),
        category="greeting",
    ),
    Template(
        id="routing-rec",
        title="Routing Recommendation",
        content=(
            "Based on your requirements, I recommend using Studio flows for more complex routing "
            "scenarios that require custom logic and conditional branching."
        ),
        category="technical",
    ),
    Template(
        id="follow-up",
        title="Follow-up Question",
        content=(
            "Is there anything else I can help you with regarding Talkdesk Digital Engagement? "
            "I'm here to assist you with any additional questions."
        ),
        category="followup",
    ),
]

DEFAULT_KNOWLEDGE = [
    KnowledgeEntry(
        id="kb-1",
        question="What is Talkdesk Digital Engagement?",
        answer=(
            "Talkdesk Digital Engagement™ empowers your contact center to quickly identify, route, "
            "and respond to customer service needs across multiple digital channels, making it easy "
            "for agents to meet customers in their preferred channel."
        ),
        source=FAQ_SOURCE,
    ),
    KnowledgeEntry(
        id="kb-2",
        question="What are some key features of Talkdesk Digital Engagement?",
        answer=(
            "Key features include: Talkdesk Agent Workspace™ for seamless customer support across any "
            "channel, unified interface for all engagement channels on a single screen, centralized "
            "queue management, unified reporting within Talkdesk Explore™, flexible routing and "
            "presence options, and integrations with Zendesk, Salesforce, Slack, Gmail, and other systems."
        ),
        source=FAQ_SOURCE,
    ),
    KnowledgeEntry(
        id="kb-3",
        question="What digital channels are currently available for Talkdesk?",
        answer=(
            "Currently, customers can have the following digital channels: SMS, Chat, Email, Digital "
            "Connect, and Social Messaging, which includes Facebook Messenger and WhatsApp Business."
        ),
        source=FAQ_SOURCE,
    ),
    KnowledgeEntry(
        id="kb-4",
        question="What types of routing can I configure for my digital channels?",
        answer=(
            "All digital channels except Chat have Simplified Routing and Studio routing options. "
            "Simplified Routing allows admins to select queues for each touchpoint. Studio provides "
            "more complex routing rules with manual or auto-acceptance. SMS also has a Dedicated Agent "
            "option. Chat only has Studio routing due to its priority and synchronous nature."
        ),
        source=FAQ_SOURCE,
    ),
    KnowledgeEntry(
        id="kb-5",
        question="How do I set an occupancy limit for agents and for each channel?",
        answer=(
            "Go to Admin > Channels > 'Global Settings' to define Conversation weight. Weight is "
            "measured by points, with each agent having a maximum capacity of 100 points. Voice "
            "conversation weight is fixed at 51 points, and you can define different weights for "
            "each digital channel with the available points."
        ),
        source=FAQ_SOURCE,
    ),
    KnowledgeEntry(
        id="kb-6",
        question="Does Talkdesk Digital Engagement have templates?",
        answer=(
            "Yes, templates are pre-written messages that help agents be more efficient. They can be "
            "grouped into collections like 'Sales' or 'Support'. You can create, edit, and manage "
            "collections and templates through Admin > Channels > 'Templates' tab. Templates are "
            "available for Email, SMS, Chat, and Digital Connect channels."
        ),
        source=FAQ_SOURCE,
    ),
]


def opening_messages() -> list[ChatMessage]:
    """The agent greeting that opens the default conversation."""
    return [
        ChatMessage(
            id="msg-1",
            conversation_id=DEFAULT_CONVERSATION_ID,
            text="What can I help you today?",
            is_agent=True,
            timestamp=datetime.now() - timedelta(minutes=10),
        )
    ]


def seed_store(store) -> None:
    """Load the default conversation, templates and knowledge into ``store``."""
    store.add_conversation(DEFAULT_CONVERSATION, opening_messages())
    for template in DEFAULT_TEMPLATES:
        store.add_template(template)
    for entry in DEFAULT_KNOWLEDGE:
        store.add_knowledge_entry(entry)
