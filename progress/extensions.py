from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from supabase import create_client, Client

db = SQLAlchemy()


def init_supabase(app):
    """Create the Supabase client once per app when credentials are configured."""
    url = app.config.get("SUPABASE_URL")
    key = app.config.get("SUPABASE_KEY")
    if not url or not key:
        app.logger.warning("Supabase credentials not set; managed tables are unavailable")
        return None
    client: Client = create_client(url, key)
    app.extensions["supabase"] = client
    return client


def get_supabase():
    client = current_app.extensions.get("supabase")
    if client is None:
        raise RuntimeError("Supabase is not configured (set SUPABASE_URL and SUPABASE_KEY)")
    return client
