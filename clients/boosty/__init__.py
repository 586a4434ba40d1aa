from .api_client import ApiClient
from .auth_provider import (
    CredentialStore,
    Credentials,
    NoCredentials,
    BearerToken,
    RefreshPair,
)
from .token_refresher import TokenRefresher, RefreshedTokens
from .executor import RequestExecutor
from .endpoints import RequestTemplate
from .options import (
    ClientOptions,
    ProxyConfig,
    CommentOrder,
    TargetType,
    build_http_client,
)
from .media_content import ContentItem, extract_content
from .model import Post, Comment, CommentBlock, CommentsResponse, PostsResponse
from .errors import (
    BoostyError,
    InvalidStateError,
    AuthError,
    InvalidCredentialsError,
    AuthNetworkError,
    AuthDecodeError,
    ApiError,
    UnauthorizedError,
    AuthFailedError,
    RequestRejectedError,
    UnavailableError,
    NetworkError,
    DecodeError,
)
