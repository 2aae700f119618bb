from supabase import create_client, Client, ClientOptions
from supabase_auth import SyncSupportedStorage
from app.config import settings


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(
                settings.supabase_url,
                settings.supabase_key,
                options=cls._options(),
            )
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use in seed scripts."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url,
                settings.supabase_service_role_key,
                options=cls._options(),
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def create_session_client(cls, storage: SyncSupportedStorage) -> Client:
        """Fresh anon client whose auth session lives in the given key store.

        Token refresh is driven by the owning SessionContext, not a background timer.
        """
        return create_client(
            settings.supabase_url,
            settings.supabase_key,
            options=cls._options(storage=storage),
        )

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None

    @staticmethod
    def _options(storage: SyncSupportedStorage = None) -> ClientOptions:
        kwargs = dict(
            auto_refresh_token=False,
            persist_session=storage is not None,
            postgrest_client_timeout=settings.request_timeout_seconds,
            storage_client_timeout=settings.storage_timeout_seconds,
        )
        if storage is not None:
            kwargs["storage"] = storage
        return ClientOptions(**kwargs)


def get_supabase() -> Client:
    return SupabaseClient.get_client()
