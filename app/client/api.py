"""HTTP client for the TechQuiz API"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from app.client.session import ClientSession

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-success envelope from the API"""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(f"{status_code}: {message}")


def answers_from_selection(selection: Mapping[int, int]) -> List[Dict[str, int]]:
    """Turn an answer sheet ``{questionIndex: selectedIndex}`` into the submission list"""
    return [
        {"questionIndex": question_index, "selectedIndex": selected_index}
        for question_index, selected_index in sorted(selection.items())
    ]


class QuizApiClient:
    """
    Thin wrapper over the HTTP API

    Args:
        http: Client whose base URL is the server plus the API prefix,
            e.g. ``http://localhost:4000/api/v1``
        session: Session supplying and receiving the bearer token
    """

    def __init__(self, http: httpx.Client, session: ClientSession):
        self.http = http
        self.session = session

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        headers = {**self.session.auth_headers(), **kwargs.pop("headers", {})}
        response = self.http.request(method, path, headers=headers, **kwargs)
        try:
            data = response.json()
        except ValueError:
            raise ApiError(response.status_code, response.text or "Invalid response from server")

        if response.is_error or not data.get("success", False):
            error = data.get("error") or {}
            raise ApiError(
                response.status_code,
                data.get("message") or "An error occurred",
                error.get("code") if isinstance(error, dict) else None,
            )
        return data

    # Auth

    def signup(self, username: str, useremail: str, password: str) -> Dict[str, Any]:
        data = self._request(
            "POST", "/auth/signup",
            json={"username": username, "useremail": useremail, "password": password},
        )
        return data["user"]

    def login(self, useremail: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"useremail": useremail, "password": password})
        self.session.save(data["token"], data["user"])
        return data["user"]

    def logout(self) -> None:
        """Tell the server, then always drop the local session"""
        try:
            if self.session.is_authenticated:
                self._request("POST", "/auth/logout")
        except (ApiError, httpx.HTTPError) as e:
            logger.warning(f"Logout call failed, clearing local session anyway: {e}")
        finally:
            self.session.clear()

    # Catalog

    def list_quizzes(
        self,
        tech: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
        sort: str = "createdAt",
    ) -> Dict[str, Any]:
        params = {"page": page, "limit": limit, "sort": sort}
        if tech:
            params["tech"] = tech
        data = self._request("GET", "/quizzes", params=params)
        return {"quizzes": data["quizzes"], "pagination": data["pagination"]}

    def list_technologies(self) -> List[str]:
        return self._request("GET", "/quizzes/technologies")["technologies"]

    def get_quiz(self, quiz_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/quizzes/{quiz_id}")["quiz"]

    # Attempts

    def submit_attempt(self, quiz_id: str, answers: List[Dict[str, int]]) -> Dict[str, Any]:
        data = self._request("POST", f"/quizzes/{quiz_id}/attempt", json={"answers": answers})
        data.pop("success", None)
        return data

    def my_attempts(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/me/attempts")["attempts"]

    # Admin

    def admin_list_quizzes(self, tech: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"tech": tech} if tech else None
        return self._request("GET", "/admin/quizzes", params=params)["quizzes"]

    def admin_get_quiz(self, quiz_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/admin/quizzes/{quiz_id}")["quiz"]

    def create_quiz(self, quiz: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/admin/quizzes", json=quiz)["quiz"]

    def update_quiz(self, quiz_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/admin/quizzes/{quiz_id}", json=changes)["quiz"]

    def delete_quiz(self, quiz_id: str) -> None:
        self._request("DELETE", f"/admin/quizzes/{quiz_id}")
