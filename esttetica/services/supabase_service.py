"""
Supabase Integration Service
Resolves bearer credentials and looks up users in Supabase Auth
"""
import logging
from dataclasses import dataclass
from typing import Optional

from supabase import create_client, Client

from esttetica.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    """Identity record from the auth provider"""
    id: str
    email: Optional[str] = None


class SupabaseService:
    """Service for Supabase authentication and user lookup"""

    def __init__(
        self,
        url: Optional[str] = None,
        anon_key: Optional[str] = None,
        service_role_key: Optional[str] = None,
    ):
        self.url = url if url is not None else settings.SUPABASE_URL
        self.anon_key = anon_key if anon_key is not None else settings.SUPABASE_ANON_KEY
        self.service_role_key = (
            service_role_key if service_role_key is not None else settings.SUPABASE_SERVICE_ROLE_KEY
        )
        self._client: Optional[Client] = None
        self._admin_client: Optional[Client] = None

    @property
    def client(self) -> Client:
        """Anonymous-key client, created on first use"""
        if self._client is None:
            try:
                self._client = create_client(self.url, self.anon_key)
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                logger.error(f"Failed to initialize Supabase client: {e}")
                raise
        return self._client

    @property
    def admin_client(self) -> Client:
        """Service-role client for admin operations"""
        if self._admin_client is None:
            try:
                self._admin_client = create_client(self.url, self.service_role_key)
            except Exception as e:
                logger.error(f"Failed to initialize Supabase admin client: {e}")
                raise
        return self._admin_client

    def get_user(self, token: str) -> Optional[AuthUser]:
        """
        Resolve the user behind a Supabase JWT

        Args:
            token: JWT token from Authorization header

        Returns:
            AuthUser or None when the token is absent, invalid or expired
        """
        if not token:
            return None
        try:
            response = self.client.auth.get_user(token)
        except Exception as e:
            logger.warning(f"Token verification failed: {e}")
            return None

        user = getattr(response, "user", None)
        if user is None:
            return None
        return AuthUser(id=str(user.id), email=getattr(user, "email", None))

    def find_user_id_by_email(self, email: str) -> Optional[str]:
        """
        Find a user id by e-mail through the admin API

        Args:
            email: Customer e-mail reported by Stripe

        Returns:
            User id or None if no user has that e-mail
        """
        users = self.admin_client.auth.admin.list_users()
        for user in users or []:
            if getattr(user, "email", None) == email:
                return str(user.id)
        return None


# Singleton instance
supabase_service = SupabaseService()


def get_identity_service() -> SupabaseService:
    """Dependency returning the identity provider"""
    return supabase_service
