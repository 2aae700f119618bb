from supabase import Client
from app.modules.roles.schemas import UserRoleName
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class RoleService:
    """Single-shot reads and writes against user_roles. Callers own retry policy."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_role(self, user_id: str) -> Optional[UserRoleName]:
        """Return the user's role, or None when no row exists. Raises on query failure."""
        result = self.supabase.table("user_roles")\
            .select("role")\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return UserRoleName(result.data[0]["role"])

    def create_role(self, user_id: str, role: UserRoleName = UserRoleName.READER) -> UserRoleName:
        self.supabase.table("user_roles").insert({
            "user_id": user_id,
            "role": role.value
        }).execute()
        return role

    def get_or_create_role(self, user_id: str) -> UserRoleName:
        role = self.get_role(user_id)
        if role is not None:
            return role
        logger.info(f"No user role found for {user_id}, creating default reader role")
        return self.create_role(user_id, UserRoleName.READER)

    def list_role_rows(self, user_id: str) -> List[Dict[str, Any]]:
        result = self.supabase.table("user_roles")\
            .select("*")\
            .eq("user_id", user_id)\
            .execute()
        return result.data or []
