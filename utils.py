import requests

CLAUDE_BASE_URL = "https://claude.ai"


class ClaudeWebClient:
    """Simple claude.ai web API client using session cookie authentication."""

    def __init__(self, session_key, base_url=CLAUDE_BASE_URL):
        self.session_key = session_key
        self.base_url = base_url.rstrip('/')
        self.session = requests.Session()
        self.session.cookies.set("sessionKey", session_key)
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": "chat-archive-tools",
        })

    def get_json(self, path, params=None):
        """GET an API path and return the decoded JSON body."""
        url = f"{self.base_url}{path}"
        response = self.session.get(url, params=params)
        if not response.ok:
            # Print detailed error for debugging
            print(f"Claude API error: {response.status_code}")
            print(f"Response: {response.text}")
        response.raise_for_status()
        return response.json()

    def conversations_path(self, org_id, conversation_id=None):
        path = f"/api/organizations/{org_id}/chat_conversations"
        if conversation_id:
            path += f"/{conversation_id}"
        return path
