"""
Backend API Service - FastAPI Application

Responsibilities:
- Persist user records submitted by the frontend into SQLite
- Export stored records as an Excel workbook
- Relay play/stop video events to every connected WebSocket client

Endpoints:
- POST /api/users - Create a user record
- GET /api/users/export - Download all records as ai_bot_users.xlsx
- GET /health - Health check
- WS /ws - Real-time video control events

Run:
    python -m services.api
"""
