from loyalty_admin.clients.loyalty_sdk.config import ConfigError, SDKConfig
from loyalty_admin.clients.loyalty_sdk.errors import (
    ApiError,
    AuthError,
    ClientValidationError,
    ConflictError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    ServerError,
    ServerValidationError,
    TimeoutError,
)
from loyalty_admin.clients.loyalty_sdk.http_client import HttpClient
from loyalty_admin.clients.loyalty_sdk.models import AdminProfile, LoginResponse, Page, VerifyResponse
from loyalty_admin.clients.loyalty_sdk.modules.auth_client import AuthClient
from loyalty_admin.clients.loyalty_sdk.modules.business_client import BusinessClient
from loyalty_admin.clients.loyalty_sdk.modules.coupons_client import CouponsClient
from loyalty_admin.clients.loyalty_sdk.modules.menu_client import MenuClient
from loyalty_admin.clients.loyalty_sdk.modules.point_tiers_client import PointTiersClient
from loyalty_admin.clients.loyalty_sdk.modules.points_client import PointsClient
from loyalty_admin.clients.loyalty_sdk.modules.rankings_client import RankingsClient
from loyalty_admin.clients.loyalty_sdk.modules.theme_client import ThemeClient
from loyalty_admin.clients.loyalty_sdk.modules.users_client import UsersClient
from loyalty_admin.clients.loyalty_sdk.normalizers import normalize_listing
from loyalty_admin.clients.loyalty_sdk.token_store import MemoryTokenStore, TokenStore

__all__ = [
    "AdminProfile",
    "ApiError",
    "AuthClient",
    "AuthError",
    "BusinessClient",
    "ClientValidationError",
    "ConfigError",
    "ConflictError",
    "CouponsClient",
    "HttpClient",
    "LoginResponse",
    "MemoryTokenStore",
    "MenuClient",
    "NetworkError",
    "NotFoundError",
    "Page",
    "PermissionDeniedError",
    "PointTiersClient",
    "PointsClient",
    "RankingsClient",
    "SDKConfig",
    "ServerError",
    "ServerValidationError",
    "ThemeClient",
    "TimeoutError",
    "TokenStore",
    "UsersClient",
    "VerifyResponse",
    "normalize_listing",
]
