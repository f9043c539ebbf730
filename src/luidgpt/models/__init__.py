"""
Data models for the LuidGPT API.

Backend records are camelCase JSON; Luidhub credit records are snake_case.
Every model ignores fields it does not know.
"""

from .base import (
    ApiDateTime,
    Envelope,
    LuidModel,
    MessageResponse,
    PaginationInfo,
    SnakeModel,
    format_api_datetime,
    parse_api_datetime,
)
from .user import (
    MemberUser,
    Organization,
    OrganizationInvitation,
    OrganizationMember,
    User,
)
from .category import (
    CATEGORY_DEFINITIONS,
    Category,
    CategoryDefinition,
    OutputType,
    category_icon,
    default_credits,
)
from .replicate_model import (
    InputProperty,
    InputSchema,
    ModelsPage,
    ReplicateModel,
    Tier,
)
from .generation import (
    ExecuteModelResponse,
    ExecutionResult,
    Generation,
    GenerationStats,
    GenerationStatus,
    ModelGeneration,
)
from .credits import (
    CheckoutSession,
    CreditBalance,
    CreditPackage,
    CreditTransaction,
    CreditTransactionMetadata,
    CreditTransactionsPage,
)
from .auth import (
    AuthTokens,
    AuthTokensResponse,
    RegisterResponse,
    RegistrationResult,
    UserResponse,
    is_valid_email,
    is_valid_password,
    password_strength,
)

__all__ = [
    # Base
    "ApiDateTime",
    "Envelope",
    "LuidModel",
    "MessageResponse",
    "PaginationInfo",
    "SnakeModel",
    "format_api_datetime",
    "parse_api_datetime",

    # Users and workspaces
    "MemberUser",
    "Organization",
    "OrganizationInvitation",
    "OrganizationMember",
    "User",

    # Catalog
    "CATEGORY_DEFINITIONS",
    "Category",
    "CategoryDefinition",
    "OutputType",
    "category_icon",
    "default_credits",
    "InputProperty",
    "InputSchema",
    "ModelsPage",
    "ReplicateModel",
    "Tier",

    # Generations
    "ExecuteModelResponse",
    "ExecutionResult",
    "Generation",
    "GenerationStats",
    "GenerationStatus",
    "ModelGeneration",

    # Credits
    "CheckoutSession",
    "CreditBalance",
    "CreditPackage",
    "CreditTransaction",
    "CreditTransactionMetadata",
    "CreditTransactionsPage",

    # Auth
    "AuthTokens",
    "AuthTokensResponse",
    "RegisterResponse",
    "RegistrationResult",
    "UserResponse",
    "is_valid_email",
    "is_valid_password",
    "password_strength",
]
