"""HaruStep core library: progression, quests, coach chat and focus timer.

Public API re-exports for convenient imports:
    from harustep import ViewRouter, load_config, apply_experience, ...
"""

# Config
from harustep.config import (
    Config,
    load_config,
    setup_logging,
)

# Models
from harustep.models import (
    AppView,
    ChatMessage,
    Difficulty,
    MoodEntry,
    Quest,
    QuestProposal,
    Role,
    TimerMode,
    TimerState,
    UserState,
)

# Progression
from harustep.progression import (
    LevelUp,
    Progression,
    apply_experience,
    dashboard_summary,
    level_progress,
)

# Timer
from harustep.timer import FocusTimer
from harustep.ticker import Ticker

# Collaborators
from harustep.providers import (
    CollaboratorError,
    MalformedResponse,
    GeminiChatResponder,
    GeminiQuestGenerator,
    OfflineChatResponder,
    OfflineQuestGenerator,
    parse_quest_proposals,
    select_collaborators,
)

# Sessions
from harustep.quests import MOODS, QuestSession, QuestState
from harustep.chat import ChatSession, ChatState
from harustep.router import ViewRouter
