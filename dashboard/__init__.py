"""FastAPI web dashboard: login, document editor API, templates API and report downloads."""
