from typing import Dict, Optional

from revclone.model import Credentials, PersonalAccessToken, UsernameAndPassword


def auth_kwargs(credentials: Optional[Credentials]) -> Dict[str, str]:
    """
    Map credentials to the keyword arguments dulwich passes to its HTTP client.

    A personal access token is sent as the username with an empty password,
    which is what the common git hosts expect for token auth over HTTPS.

    Args:
        credentials: Username/password pair, token, or None

    Returns:
        Keyword arguments for porcelain.clone (empty for no authentication)
    """
    if isinstance(credentials, UsernameAndPassword):
        return {"username": credentials.username, "password": credentials.password}
    if isinstance(credentials, PersonalAccessToken):
        return {"username": credentials.token, "password": ""}
    return {}
