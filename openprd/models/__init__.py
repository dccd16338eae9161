"""SQLAlchemy models."""
from openprd.models.api_key import ApiKey
from openprd.models.generation_log import GenerationLog
from openprd.models.prd import PRD, Section
from openprd.models.system_prompt import SystemPrompt
from openprd.models.user import User

__all__ = [
    "ApiKey",
    "GenerationLog",
    "PRD",
    "Section",
    "SystemPrompt",
    "User",
]
