import os

# Set env vars BEFORE any imports from the project happen
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("GATEWAY_SECRET", "test-secret")
os.environ.setdefault("CLIENT_URL", "http://localhost:3000")
