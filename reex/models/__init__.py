# reex/models/__init__.py

# In-memory entities held by the ConversationStore
from .conversation import Conversation
from .message import Message
