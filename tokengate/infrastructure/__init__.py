"""Infrastructure layer: Supabase REST clients, repositories, and edge-function email."""
