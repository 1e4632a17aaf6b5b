"""
Form Session Manager

Open inspection forms (memory based)
"""
from typing import Dict, Optional
import threading
import uuid

from jalpan.domain.inspection.exceptions import FormSessionNotFoundError
from jalpan.domain.inspection.form import InspectionForm


class FormSessionManager:
    """Form session manager (memory based)"""

    def __init__(self):
        self._sessions: Dict[str, InspectionForm] = {}
        self._lock = threading.Lock()

    def create_session(self, form: InspectionForm) -> str:
        """
        Register a form

        Args:
            form: inspection form

        Returns:
            session ID
        """
        session_id = str(uuid.uuid4())
        form.session_id = session_id
        with self._lock:
            self._sessions[session_id] = form
        return session_id

    def get_session(self, session_id: str) -> InspectionForm:
        """
        Look up a form

        Raises:
            FormSessionNotFoundError: unknown session id
        """
        form = self._sessions.get(session_id)
        if form is None:
            raise FormSessionNotFoundError(
                f"Form session not found: {session_id}",
                details={"session_id": session_id}
            )
        return form

    def delete_session(self, session_id: str):
        with self._lock:
            self._sessions.pop(session_id, None)

    def list_sessions(self) -> Dict[str, InspectionForm]:
        """All open forms"""
        return self._sessions.copy()


# Singleton instance
_session_manager: Optional[FormSessionManager] = None


def get_form_session_manager() -> FormSessionManager:
    """FormSessionManager singleton"""
    global _session_manager
    if _session_manager is None:
        _session_manager = FormSessionManager()
    return _session_manager
