# storage/__init__.py
"""
Storage package: Supabase documents, chunks, files and school records.
"""

from .supabase_storage import (
    SupabaseVectorStore,
    DocumentRecord,
    ChunkRecord,
    service_client,
    user_client,
)
from .school_directory import SchoolDirectory, Profile

__all__ = [
    'SupabaseVectorStore',
    'DocumentRecord',
    'ChunkRecord',
    'service_client',
    'user_client',
    'SchoolDirectory',
    'Profile',
]
