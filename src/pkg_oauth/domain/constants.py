from enum import Enum

# Rendered `sub` of tokens issued without an end user (client-credential grants).
ANONYMOUS_SUBJECT = "ANONYMOUS"

BEARER_TOKEN_TYPE = "Bearer"


class TokenRepresentation(Enum):
    SELF_CONTAINED = "jwt"
    OPAQUE = "opaque"


class ClientConfidentiality(Enum):
    CONFIDENTIAL = "confidential"
    PUBLIC = "public"


class OAuthErrorCode(Enum):
    INVALID_CLIENT = "invalid_client"
    INVALID_TOKEN = "invalid_token"
