"""Repository layer."""
from openprd.repositories.api_key_repo import ApiKeyRepository
from openprd.repositories.generation_log_repo import GenerationLogRepository
from openprd.repositories.prd_repo import PRDRepository, SectionRepository
from openprd.repositories.system_prompt_repo import SystemPromptRepository
from openprd.repositories.user_repo import UserRepository

__all__ = [
    "ApiKeyRepository",
    "GenerationLogRepository",
    "PRDRepository",
    "SectionRepository",
    "SystemPromptRepository",
    "UserRepository",
]
